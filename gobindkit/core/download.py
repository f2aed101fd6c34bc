"""
Network download helpers with progress tracking and retry logic.

This module provides the HTTP layer used by the resource catalog and the
toolchain provisioner:
- Whole-body fetches for small documents (catalog snapshots)
- Streaming downloads to disk for large archives
- Progress reporting (bytes, percentage, speed, ETA)
- Retry logic with exponential backoff
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from gobindkit.core.exceptions import FetchError

logger = logging.getLogger(__name__)


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def fetch_bytes(url: str, timeout: int = 30) -> bytes:
    """
    Fetch a small document into memory.

    A single GET is issued; callers that need a fresh copy of a remote
    snapshot rely on this never falling back to any cached content.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds

    Returns:
        Response body

    Raises:
        FetchError: If the request fails or the server answers with an error
    """
    if not url:
        raise ValueError("URL cannot be empty")

    logger.debug(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e

    return response.content


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with retry logic.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        FetchError: If download fails after retries
        ValueError: If URL or destination is invalid

    Example:
        >>> from gobindkit.core.download import download_file
        >>> url = "https://dl.google.com/go/go1.12.4.linux-amd64.tar.gz"
        >>> download_file(url, Path("downloads/go1.12.4.linux-amd64.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _download_with_progress(
                url=url,
                destination=destination,
                progress_callback=progress_callback,
                timeout=timeout,
            )
        except RequestException as e:
            if destination.exists():
                destination.unlink()

            if attempt == max_retries - 1:
                raise FetchError(
                    f"Download failed after {max_retries} attempts: {e}", url=url
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise FetchError(f"Download failed for unknown reason: {url}", url=url)


def _download_with_progress(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: int,
) -> Path:
    """Stream the response body into destination, reporting progress."""
    logger.info(f"Downloading from {url}")

    response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
    response.raise_for_status()

    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=8192):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            # Report progress at most twice per second
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                eta = remaining / speed if speed > 0 else 0

                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=eta,
                    )
                )
                last_progress_time = current_time

    logger.info(f"Download complete: {destination}")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
