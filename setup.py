#!/usr/bin/env python

from setuptools import setup, find_packages
import wwwauth

setup(name='wwwauth',
      version=wwwauth.__version__,
      description='HTTP authentication headers and a Basic-authenticating server.',
      long_description=open("README.md").read(),
      long_description_content_type="text/markdown",
      license = "MIT",
      packages=find_packages(exclude=["test"]),
      package_dir={'wwwauth': 'wwwauth'},
      scripts=['bin/wwwauth_cli', 'bin/wwwauth_daemon.py'],
      python_requires=">=3.8",
      install_requires=[
          'thor >= 0.8.0',
          'typing_extensions'
      ],
      extras_require={
          'dev': [
          'mypy',
          'pytest'
          ]
      },
      classifiers=[
        'Programming Language :: Python :: 3.8',
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Environment :: Web Environment',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Security',
        'Operating System :: Unix',
        'Operating System :: MacOS :: MacOS X',
        'License :: OSI Approved :: MIT License',
      ],
)
