"""
Middleware modules for the sws-blog server.

This package contains custom middleware for request logging and retired-URL
handling.
"""

from .gone_urls import GoneUrlMiddleware
from .logfire_middleware import LogfireMiddleware

__all__ = ["GoneUrlMiddleware", "LogfireMiddleware"]
