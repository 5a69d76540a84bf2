"""
Utility modules.
"""

from .logger import get_logger, setup_logger, ValidationLogger

__all__ = [
    "get_logger",
    "setup_logger",
    "ValidationLogger",
]
