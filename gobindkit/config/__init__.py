"""Configuration module for GobindKit.

This module provides YAML configuration parsing and validation for gobindkit.yaml.
"""

from gobindkit.config.parser import (
    AndroidBuild,
    BuildConfiguration,
    BuildSection,
    ConfigError,
    GomobileBuild,
    IosBuild,
    ToolchainVersions,
    parse_config,
)

__all__ = [
    "AndroidBuild",
    "BuildConfiguration",
    "BuildSection",
    "ConfigError",
    "GomobileBuild",
    "IosBuild",
    "ToolchainVersions",
    "parse_config",
]
