"""
Utility functions for uvcctl
"""

from .logger import get_logger, get_category_logger, configure_logger, Colors

__all__ = [
    'get_logger',
    'get_category_logger',
    'configure_logger',
    'Colors',
]
