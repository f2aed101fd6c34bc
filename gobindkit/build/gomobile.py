"""
gomobile installation and the ``gomobile bind`` compile step.

Both run in GOPATH mode (GO111MODULE=off) against the workspace assembled by
gobindkit.modules.workspace.
"""

import logging
from pathlib import Path
from typing import List, Sequence

from gobindkit.config.parser import BuildConfiguration, GomobileBuild
from gobindkit.core.environment import EnvironmentContext
from gobindkit.core.exceptions import ConfigError, ProcessError

logger = logging.getLogger(__name__)

GOMOBILE_PACKAGE = "golang.org/x/mobile/cmd/gomobile"

TARGET_ALL = "all"
TARGET_ANDROID = "gomobile/android"
TARGET_IOS = "gomobile/ios"
KNOWN_TARGETS = (TARGET_ALL, TARGET_ANDROID, TARGET_IOS)


def has_target(targets: Sequence[str], target: str) -> bool:
    """True if target was requested explicitly or through ``all``."""
    return any(t == target or t == TARGET_ALL for t in targets)


def require_gomobile(config: BuildConfiguration) -> GomobileBuild:
    gomobile = config.build.gomobile
    if gomobile is None:
        raise ConfigError(f"Project '{config.name}' has no build.gomobile section")
    return gomobile


def has_android_build(config: BuildConfiguration, targets: Sequence[str]) -> bool:
    """An android section is declared and the android target is selected."""
    # Requires the android section itself, not any gomobile section (see DESIGN.md)
    gomobile = config.build.gomobile
    return (
        gomobile is not None
        and gomobile.android is not None
        and has_target(targets, TARGET_ANDROID)
    )


def has_ios_build(config: BuildConfiguration, targets: Sequence[str]) -> bool:
    """An enabled ios section is declared and the ios target is selected."""
    gomobile = config.build.gomobile
    return (
        gomobile is not None
        and gomobile.ios is not None
        and not gomobile.ios.disabled
        and has_target(targets, TARGET_IOS)
    )


def gomobile_binary(gopath: Path) -> Path:
    return Path(gopath) / "bin" / "gomobile"


def prepare_gomobile(env: EnvironmentContext, gopath: Path) -> Path:
    """
    Install gomobile into the GOPATH unless it is already there.

    Returns:
        Path to the gomobile binary

    Raises:
        ProcessError: If installing or initializing gomobile fails
    """
    binary = gomobile_binary(gopath)
    if binary.exists():
        logger.debug(f"gomobile already installed: {binary}")
        return binary

    env.chdir(gopath)
    env.set("GO111MODULE", "off")

    logger.info("Installing gomobile")
    steps = [
        ("install", ["go", "get", "-u", GOMOBILE_PACKAGE]),
        ("invoke", ["bin/gomobile", "version"]),
        # gomobile reads the NDK from ANDROID_NDK_HOME; init only prepares caches
        ("init", ["bin/gomobile", "init"]),
    ]
    for action, command in steps:
        try:
            env.run(*command, check=True)
        except ProcessError as e:
            raise ProcessError(
                f"Failed to {action} gomobile: {e}",
                command=e.command,
                returncode=e.returncode,
                output=e.output,
            ) from e

    return binary


def android_bind_args(
    config: BuildConfiguration, base_dir: Path
) -> List[str]:
    gomobile = require_gomobile(config)
    android = gomobile.android
    out = android.out or f"./{config.name}.aar"

    args = ["bind", "-v", "-o", str(resolve_path(out, base_dir))]
    if android.javapkg:
        args += ["-javapkg", android.javapkg]
    if android.ldflags:
        args += ["-ldflags", android.ldflags]
    args.append("-target=android")
    args.extend(gomobile.export)
    return args


def ios_bind_args(config: BuildConfiguration, base_dir: Path) -> List[str]:
    gomobile = require_gomobile(config)
    ios = gomobile.ios
    out = ios.out or f"./{config.name}.framework"

    args = ["bind", "-v", "-o", str(resolve_path(out, base_dir))]
    if ios.prefix:
        args += ["-prefix", ios.prefix]
    if ios.bundleid:
        args += ["-bundleid", ios.bundleid]
    if ios.ldflags:
        args += ["-ldflags", ios.ldflags]
    args.append("-target=ios")
    args.extend(gomobile.export)
    return args


def compile_gomobile(
    config: BuildConfiguration,
    targets: Sequence[str],
    env: EnvironmentContext,
    gopath: Path,
    base_dir: Path,
) -> List[Path]:
    """
    Run ``gomobile bind`` for every active platform.

    Returns:
        Output artifact paths, android first

    Raises:
        ProcessError: If a bind invocation fails
    """
    logger.info("Compiling gomobile bindings")
    env.chdir(gopath)
    env.set("GO111MODULE", "off")

    builds = []
    if has_android_build(config, targets):
        builds.append(android_bind_args(config, base_dir))
    if has_ios_build(config, targets):
        builds.append(ios_bind_args(config, base_dir))

    if not builds:
        logger.warning("No gomobile target selected, nothing to compile")

    outputs = []
    for args in builds:
        env.run("bin/gomobile", *args, check=True)
        outputs.append(Path(args[args.index("-o") + 1]))
    return outputs


def resolve_path(path: str, base_dir: Path) -> Path:
    """Resolve a configured path against the project base directory."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return (Path(base_dir) / candidate).resolve()
