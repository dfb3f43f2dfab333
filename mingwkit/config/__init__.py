"""Configuration module for MingwKit.

This module provides YAML configuration parsing for mingwkit.yaml and the
environment/command-line overrides applied on top of it.
"""

from mingwkit.config.parser import (
    ToolchainSettings,
    NativeLibrarySettings,
    MingwKitConfig,
    ConfigError,
    parse_config,
    load_config,
)

__all__ = [
    "ToolchainSettings",
    "NativeLibrarySettings",
    "MingwKitConfig",
    "ConfigError",
    "parse_config",
    "load_config",
]
