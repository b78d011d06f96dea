"""
Utility Functions and Helpers

Common utilities for the capture pipeline.
"""

from .config_manager import ConfigManager

__all__ = ['ConfigManager']
