"""
Utility modules for configuration
"""

from .config import Config

__all__ = ['Config']
