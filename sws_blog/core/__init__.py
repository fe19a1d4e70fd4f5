"""
Core utilities and configuration for sws-blog.

This package provides core functionality including logging configuration,
database setup, domain errors, and other shared utilities.
"""

from sws_blog.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
