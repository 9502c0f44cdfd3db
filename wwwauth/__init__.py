"""
wwwauth: HTTP request authentication (RFC 7235 / RFC 7617).
"""

__version__ = "1.0.0"
