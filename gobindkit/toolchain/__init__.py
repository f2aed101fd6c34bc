"""
Toolchain management module for GobindKit.

This module provides functionality for:
- Resource catalog download and lookup
- Toolchain download and extraction into the shared cache
- Exporting Go, NDK and SDK locations into a build environment
"""

from gobindkit.core.exceptions import (
    InvalidResourceError,
    ResourceNotFoundError,
)
from gobindkit.toolchain.catalog import (
    CATALOG_TTL_SECONDS,
    Resource,
    ResourceCatalog,
    parse_catalog,
)
from gobindkit.toolchain.provisioner import ToolchainProvisioner
from gobindkit.toolchain.setup import ToolchainPaths, prepare_toolchain

__all__ = [
    # Catalog
    "CATALOG_TTL_SECONDS",
    "Resource",
    "ResourceCatalog",
    "ResourceNotFoundError",
    "parse_catalog",
    # Provisioner
    "InvalidResourceError",
    "ToolchainProvisioner",
    # Environment setup
    "ToolchainPaths",
    "prepare_toolchain",
]
