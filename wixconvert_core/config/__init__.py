"""
Configuration Management
========================

Configuration utilities for the converter.
"""

from wixconvert_core.config.settings import (
    ConverterConfig,
    get_default_config,
    load_config,
    save_config,
)

__all__ = [
    "ConverterConfig",
    "get_default_config",
    "load_config",
    "save_config",
]
