"""
Configuration module for the legal text purifier.
"""
from .constants import *
from .logging_config import setup_logger, get_logger, preview, logger

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    'preview',
    'logger',
    # Constants (all exported via *)
]
