"""
Core functionality for GobindKit.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    get_home_dir,
    get_catalog_path,
    get_toolchains_dir,
    get_downloads_dir,
    get_build_dir,
    get_gopath,
)

from .environment import (
    CommandResult,
    EnvironmentContext,
)

from .exceptions import (
    GobindKitError,
    FetchError,
    ParseError,
    NotFoundError,
    ResourceNotFoundError,
    InvalidResourceError,
    ManifestMissingError,
    FileSystemError,
    ProcessError,
    ConfigError,
    PipelineError,
)

__all__ = [
    "get_home_dir",
    "get_catalog_path",
    "get_toolchains_dir",
    "get_downloads_dir",
    "get_build_dir",
    "get_gopath",
    "CommandResult",
    "EnvironmentContext",
    "GobindKitError",
    "FetchError",
    "ParseError",
    "NotFoundError",
    "ResourceNotFoundError",
    "InvalidResourceError",
    "ManifestMissingError",
    "FileSystemError",
    "ProcessError",
    "ConfigError",
    "PipelineError",
]
