"""
Core utilities and configuration for the portfolio CMS.

This package provides core functionality including logging configuration,
caching, database setup, security and other shared utilities.
"""

from portfolio_cms.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
