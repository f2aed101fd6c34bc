"""
Toolchain preparation for a gomobile build.

Looks up the configured Go, NDK and SDK versions in the catalog, provisions
the ones the selected targets need and exports the toolchain locations into
the build environment.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from gobindkit.build.gomobile import has_android_build, require_gomobile
from gobindkit.config.parser import BuildConfiguration
from gobindkit.core.environment import EnvironmentContext
from gobindkit.core.exceptions import ProcessError
from gobindkit.core.filesystem import ensure_directory
from gobindkit.toolchain.catalog import ResourceCatalog
from gobindkit.toolchain.provisioner import ToolchainProvisioner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolchainPaths:
    """Where the toolchains of a build live."""

    goroot: Path
    gopath: Path
    ndk: Path
    sdk: Path


def prepare_toolchain(
    config: BuildConfiguration,
    targets: Sequence[str],
    catalog: ResourceCatalog,
    provisioner: ToolchainProvisioner,
    env: EnvironmentContext,
    gopath: Path,
) -> ToolchainPaths:
    """
    Provision toolchains and export GOROOT, GOPATH, PATH and Android variables.

    All three versions must be known to the catalog even when the Android
    toolchains are not needed by the selected targets.

    Raises:
        NotFoundError: If a configured version is not in the catalog
        FetchError: If a toolchain cannot be downloaded
        FileSystemError: If a toolchain cannot be extracted
    """
    versions = require_gomobile(config).toolchain

    go = catalog.get("go", versions.go)
    ndk = catalog.get("ndk", versions.ndk)
    sdk = catalog.get("sdk", versions.sdk)

    resources = [go]
    if has_android_build(config, targets):
        resources += [ndk, sdk]

    for resource in resources:
        provisioner.ensure(resource)

    paths = ToolchainPaths(
        goroot=provisioner.path_for(go),
        gopath=Path(gopath),
        ndk=provisioner.path_for(ndk),
        sdk=provisioner.path_for(sdk),
    )

    env.set("GOROOT", paths.goroot)
    env.set("GOPATH", paths.gopath)
    env.prepend_path(paths.goroot / "bin", paths.gopath / "bin")
    ensure_directory(paths.gopath)

    # Diagnostics only: show which go binary the build will pick up
    try:
        env.run("which", "go")
    except ProcessError as e:
        logger.debug(f"Cannot locate go: {e}")

    env.set("ANDROID_NDK_HOME", paths.ndk)
    env.set("NDK_PATH", paths.ndk)
    env.set("ANDROID_HOME", paths.sdk)

    logger.info(f"Toolchain ready: go {versions.go} at {paths.goroot}")
    return paths
