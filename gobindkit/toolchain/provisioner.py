"""
Toolchain download and extraction.

A toolchain directory only ever appears at its final path through a rename
from a staging directory, so its presence alone proves the extraction
completed. Interrupted runs may leave ``<target>.tmp`` behind; it is
discarded and rebuilt on the next attempt.
"""

import logging
from pathlib import Path
from typing import Optional

from gobindkit.core import filesystem
from gobindkit.core.directory import get_downloads_dir, get_toolchains_dir
from gobindkit.core.download import DownloadProgress, format_progress
from gobindkit.core.exceptions import (
    FetchError,
    FileSystemError,
    InvalidResourceError,
)
from gobindkit.toolchain.catalog import Resource

logger = logging.getLogger(__name__)


class ToolchainProvisioner:
    """
    Ensures toolchains exist under ``<home>/toolchains/<name>-<version>``.

    Example:
        >>> provisioner = ToolchainProvisioner(home_dir)
        >>> goroot = provisioner.ensure(catalog.get("go", "1.12.4"))
    """

    def __init__(self, home_dir: Path, downloads_dir: Optional[Path] = None):
        self.home_dir = Path(home_dir)
        self.toolchains_dir = get_toolchains_dir(self.home_dir)
        self.downloads_dir = downloads_dir or get_downloads_dir(self.home_dir)

    def path_for(self, resource: Resource) -> Path:
        return self.toolchains_dir / resource.id

    def is_provisioned(self, resource: Resource) -> bool:
        return self.path_for(resource).exists()

    def _log_progress(self, progress: DownloadProgress) -> None:
        logger.debug(f"  {format_progress(progress)}")

    def ensure(self, resource: Resource) -> Path:
        """
        Return the toolchain directory, downloading it first if absent.

        Raises:
            FetchError: If the archive cannot be downloaded
            FileSystemError: If extraction or the final rename fails
            InvalidResourceError: If the archive contains nothing
        """
        target = self.path_for(resource)
        if target.exists():
            logger.debug(f"Toolchain {resource.id} exists: {target}")
            return target

        logger.info(f"Provisioning toolchain {resource.id}")
        staging = target.with_name(target.name + ".tmp")

        filesystem.remove_quietly(staging)
        filesystem.ensure_directory(staging)
        filesystem.ensure_directory(self.downloads_dir)

        try:
            filesystem.download_and_unpack(
                resource.url,
                staging,
                self.downloads_dir,
                progress_callback=self._log_progress,
            )
        except FetchError as e:
            raise FetchError(
                f"Failed to provide resource {resource}: {e}", url=resource.url
            ) from e
        except FileSystemError as e:
            raise FileSystemError(f"Failed to provide resource {resource}: {e}") from e

        entries = list(staging.iterdir())
        if not entries:
            filesystem.remove_quietly(staging)
            raise InvalidResourceError(f"No files in resource: {resource}")

        # Unwrap archives that hold a single root folder
        if len(entries) == 1 and entries[0].is_dir():
            root = entries[0]
        else:
            root = staging

        try:
            root.rename(target)
        except OSError as e:
            raise FileSystemError(
                f"Failed to move {root} to {target} for {resource.id}: {e}"
            ) from e

        filesystem.remove_quietly(staging)
        logger.info(f"Toolchain {resource.id} ready at {target}")
        return target
