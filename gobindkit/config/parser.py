"""YAML configuration parser for GobindKit.

This module provides parsing and validation for gobindkit.yaml build files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from gobindkit.core.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "gobindkit.yaml"

DEFAULT_GO_VERSION = "1.12.4"
DEFAULT_NDK_VERSION = "r19c"
DEFAULT_SDK_VERSION = "433796"


@dataclass
class ToolchainVersions:
    """Toolchain versions; unset entries fall back to the defaults."""

    go: str = DEFAULT_GO_VERSION
    ndk: str = DEFAULT_NDK_VERSION
    sdk: str = DEFAULT_SDK_VERSION


@dataclass
class IosBuild:
    """How the iOS framework is built (macOS with Xcode only)."""

    prefix: Optional[str] = None  # gomobile -prefix
    out: Optional[str] = None  # gomobile -o, a .framework folder
    bundleid: Optional[str] = None  # gomobile -bundleid
    ldflags: Optional[str] = None
    disabled: bool = False


@dataclass
class AndroidBuild:
    """How the Android library is built."""

    javapkg: Optional[str] = None  # gomobile -javapkg
    out: Optional[str] = None  # gomobile -o, an .aar file
    ldflags: Optional[str] = None


@dataclass
class GomobileBuild:
    """The gomobile section: toolchain, platforms, modules and exports."""

    toolchain: ToolchainVersions = field(default_factory=ToolchainVersions)
    ios: Optional[IosBuild] = None
    android: Optional[AndroidBuild] = None
    modules: List[str] = field(default_factory=list)
    # Packages handed to gobind; gomobile does not export transitively
    export: List[str] = field(default_factory=list)


@dataclass
class BuildSection:
    gomobile: Optional[GomobileBuild] = None


@dataclass
class BuildConfiguration:
    """Complete build configuration."""

    name: str
    build: BuildSection = field(default_factory=BuildSection)


def parse_config(config_path: Path) -> BuildConfiguration:
    """
    Parse a gobindkit.yaml configuration file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is missing or invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if data is None:
        raise ConfigError(f"Configuration file is empty: {config_path}")

    return _parse_and_validate(data)


def _parse_and_validate(data: Any) -> BuildConfiguration:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    name = data.get("name")
    if not name:
        raise ConfigError("Missing required field: name")
    if "/" in str(name) or str(name) in (".", ".."):
        raise ConfigError(f"Invalid project name: {name}")

    build_data = _mapping(data.get("build"), "build")
    gomobile_data = build_data.get("gomobile")
    gomobile = _parse_gomobile(gomobile_data) if gomobile_data is not None else None

    return BuildConfiguration(name=str(name), build=BuildSection(gomobile=gomobile))


def _mapping(value: Any, section: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section '{section}' must be a mapping")
    return value


def _string_list(value: Any, section: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{section}' must be a list")
    return [str(item) for item in value]


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_gomobile(data: Any) -> GomobileBuild:
    """Parse the build.gomobile section."""
    data = _mapping(data, "build.gomobile")

    toolchain_data = _mapping(data.get("toolchain"), "build.gomobile.toolchain")
    toolchain = ToolchainVersions(
        go=_optional_str(toolchain_data.get("go")) or DEFAULT_GO_VERSION,
        ndk=_optional_str(toolchain_data.get("ndk")) or DEFAULT_NDK_VERSION,
        sdk=_optional_str(toolchain_data.get("sdk")) or DEFAULT_SDK_VERSION,
    )

    ios = None
    if data.get("ios") is not None:
        ios_data = _mapping(data["ios"], "build.gomobile.ios")
        ios = IosBuild(
            prefix=_optional_str(ios_data.get("prefix")),
            out=_optional_str(ios_data.get("out")),
            bundleid=_optional_str(ios_data.get("bundleid")),
            ldflags=_optional_str(ios_data.get("ldflags")),
            disabled=bool(ios_data.get("disabled", False)),
        )

    android = None
    if data.get("android") is not None:
        android_data = _mapping(data["android"], "build.gomobile.android")
        android = AndroidBuild(
            javapkg=_optional_str(android_data.get("javapkg")),
            out=_optional_str(android_data.get("out")),
            ldflags=_optional_str(android_data.get("ldflags")),
        )

    return GomobileBuild(
        toolchain=toolchain,
        ios=ios,
        android=android,
        modules=_string_list(data.get("modules"), "build.gomobile.modules"),
        export=_string_list(data.get("export"), "build.gomobile.export"),
    )
