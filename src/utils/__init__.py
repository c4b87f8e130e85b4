"""
Utilities Module

Configuration loading and logging setup.
"""

from .config_loader import ConfigLoader
from .logger import setup_logging

__all__ = [
    'ConfigLoader',
    'setup_logging',
]
