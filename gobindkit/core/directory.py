"""
Directory structure management for GobindKit.

Directory Structure:
    Home (~/.gobindkit/ or $GOBINDKIT_HOME):
        - resources.json  : Cached catalog snapshot (refreshed daily)
        - toolchains/     : Extracted toolchains, one directory per name-version
        - downloads/      : Archives while they are being unpacked
        - <project>/      : Per-project build directory
          - go/           : Artificial GOPATH (bin/, pkg/mod/, src/)
"""

import os
from pathlib import Path

HOME_ENV_VAR = "GOBINDKIT_HOME"
CATALOG_FILE_NAME = "resources.json"


def get_home_dir() -> Path:
    """
    Get the GobindKit home directory.

    Returns:
        Path: $GOBINDKIT_HOME if set, otherwise ~/.gobindkit

    Example:
        >>> get_home_dir()
        PosixPath('/home/user/.gobindkit')
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".gobindkit"


def get_catalog_path(home_dir: Path) -> Path:
    """Location of the cached catalog snapshot."""
    return Path(home_dir) / CATALOG_FILE_NAME


def get_toolchains_dir(home_dir: Path) -> Path:
    """Directory holding extracted toolchains."""
    return Path(home_dir) / "toolchains"


def get_downloads_dir(home_dir: Path) -> Path:
    """Directory holding archives during download."""
    return Path(home_dir) / "downloads"


def get_build_dir(home_dir: Path, project_name: str) -> Path:
    """
    Per-project build directory.

    Parallel builds of the same project share this directory and are not
    supported.
    """
    return Path(home_dir) / project_name


def get_gopath(build_dir: Path) -> Path:
    """The artificial GOPATH inside a build directory."""
    return Path(build_dir) / "go"
