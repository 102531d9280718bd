"""
Configuration for the shattering pipeline.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
