#!/usr/bin/env python3

"""
Run the wwwauth server as a daemon.
"""

from wwwauth.daemon import main

if __name__ == "__main__":
    main()
