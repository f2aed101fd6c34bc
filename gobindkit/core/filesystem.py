"""
File system utilities for GobindKit.

This module provides the file operations the pipeline is built from:
- Archive extraction (zip, tar, tar.gz, tar.xz, tar.bz2) with traversal checks
- Download-and-unpack of remote archives
- Safe file operations (atomic writes, tree removal, copy and move)

Failures are reported as FileSystemError (or a subclass) naming the path
involved.
"""

import logging
import os
import shutil
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Optional, Union

from gobindkit.core.download import DownloadProgress, download_file
from gobindkit.core.exceptions import FileSystemError

logger = logging.getLogger(__name__)


class ArchiveExtractionError(FileSystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Archive Extraction
# ============================================================================

SUPPORTED_ARCHIVES = (".zip", ".tar.gz", ".tgz", ".tar.xz", ".tar.bz2", ".tbz2", ".tar")


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Extract an archive to a destination directory.

    The format is chosen from the file name. All member paths are validated
    before anything is written.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('go1.12.4.linux-amd64.tar.gz', '/tmp/go')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith(".zip"):
            _extract_zip(archive_path, destination)
        elif archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive_path, destination, "r:gz")
        elif archive_name.endswith(".tar.xz"):
            _extract_tar(archive_path, destination, "r:xz")
        elif archive_name.endswith((".tar.bz2", ".tbz2")):
            _extract_tar(archive_path, destination, "r:bz2")
        elif archive_name.endswith(".tar"):
            _extract_tar(archive_path, destination, "r:")
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.name}. "
                f"Supported: {', '.join(SUPPORTED_ARCHIVES)}"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, restoring unix permission bits."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()

        for member in members:
            _validate_archive_path(member.filename, destination)

        for member in members:
            extracted = zf.extract(member, destination)
            # SDK and NDK zips carry executables; zipfile drops the mode bits
            mode = (member.external_attr >> 16) & 0o777
            if mode and not member.is_dir():
                os.chmod(extracted, mode)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def download_and_unpack(
    url: str,
    destination: Path,
    downloads_dir: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> None:
    """
    Download an archive and extract it into destination.

    The archive is kept in downloads_dir only for the duration of the call.
    progress_callback is passed through to the download.

    Raises:
        FetchError: If the download fails
        ArchiveExtractionError: If the archive cannot be extracted
    """
    archive_name = url.rstrip("/").split("/")[-1].split("?")[0] or "archive"
    archive_path = Path(downloads_dir) / archive_name

    try:
        download_file(url, archive_path, progress_callback=progress_callback)
        logger.debug(f"Unpacking {archive_path} into {destination}")
        extract_archive(archive_path, destination)
    finally:
        remove_quietly(archive_path)


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observed in a partially-written state. If the write
    fails, the original file (if any) remains unchanged.

    Example:
        >>> atomic_write('resources.json', b'{"go": []}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def remove_tree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree; a missing path is not an error.

    Raises:
        FileSystemError: If path is not a directory or deletion fails
    """
    path = Path(path)

    if path.is_symlink():
        try:
            path.unlink()
        except OSError as e:
            raise FileSystemError(f"Failed to remove link '{path}': {e}") from e
        return

    if not path.exists():
        return

    if not path.is_dir():
        raise FileSystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FileSystemError(f"Failed to remove directory '{path}': {e}") from e


def remove_quietly(path: Union[str, Path]) -> None:
    """
    Best-effort removal of a file or directory tree.

    Used for cleanups that are not load-bearing; failures are logged and
    otherwise ignored.
    """
    path = Path(path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
    except OSError as e:
        logger.debug(f"Ignoring failure to remove {path}: {e}")


def copy_tree(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy a directory tree, preserving symlinks and metadata.

    Raises:
        FileSystemError: If source is missing or the copy fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FileSystemError(f"Source does not exist: {source}")

    if not source.is_dir():
        raise FileSystemError(f"Source is not a directory: {source}")

    try:
        shutil.copytree(
            source,
            destination,
            symlinks=True,
            dirs_exist_ok=True,
        )
        # Module cache entries are read-only; the staged copy must stay writable
        for item in [destination, *destination.rglob("*")]:
            if item.is_symlink():
                continue
            mode = item.stat().st_mode
            if not mode & 0o200:
                item.chmod(mode | 0o200)
    except (OSError, shutil.Error) as e:
        raise FileSystemError(
            f"Failed to copy directory {source} -> {destination}: {e}"
        ) from e


def move_tree(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Move a directory to destination, creating the parent if needed.

    The destination must not exist.

    Raises:
        FileSystemError: If the move fails
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FileSystemError(f"Source does not exist: {source}")

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
    except (OSError, shutil.Error) as e:
        raise FileSystemError(f"Failed to move: {source} -> {destination}: {e}") from e


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Raises:
        FileSystemError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"Failed to create directory {path}: {e}") from e
    return path


__all__ = [
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "SUPPORTED_ARCHIVES",
    "extract_archive",
    "download_and_unpack",
    "atomic_write",
    "remove_tree",
    "remove_quietly",
    "copy_tree",
    "move_tree",
    "ensure_directory",
]
