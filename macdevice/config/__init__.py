"""
Configuration management for macdevice.
"""

from .config import load_config, DEFAULTS_PATH, USER_CONFIG_PATH

__all__ = [
    'load_config',
    'DEFAULTS_PATH',
    'USER_CONFIG_PATH',
]
