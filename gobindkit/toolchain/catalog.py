"""
Resource catalog: which toolchain versions exist and where to download them.

The catalog is a JSON snapshot kept in the GobindKit home directory and
refreshed from a remote URL at most once a day:

    {
      "go":  [{"version": "1.12.4", "url": "https://.../go1.12.4.linux-amd64.tar.gz"}],
      "ndk": [{"version": "r19c",   "url": "https://.../android-ndk-r19c-linux-x86_64.zip"}]
    }
"""

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from gobindkit.core.download import fetch_bytes
from gobindkit.core.exceptions import ParseError, ResourceNotFoundError
from gobindkit.core.filesystem import atomic_write, remove_quietly

logger = logging.getLogger(__name__)

CATALOG_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class Resource:
    """A downloadable artifact, keyed by (name, version)."""

    name: str
    version: str
    url: str

    @property
    def id(self) -> str:
        """Directory-friendly identifier, e.g. ``go-1.12.4``."""
        return f"{self.name}-{self.version}"

    def __str__(self) -> str:
        return f"{self.id} ({self.url})"


def parse_catalog(data: Any, source: Optional[Path] = None) -> Dict[str, List[Resource]]:
    """
    Validate decoded catalog content and build Resource entries.

    Raises:
        ParseError: If the structure is not name -> [{version, url}, ...]
    """
    if not isinstance(data, dict):
        raise ParseError("catalog must be a mapping of resource names", path=source)

    resources: Dict[str, List[Resource]] = {}
    for name, entries in data.items():
        if not isinstance(entries, list):
            raise ParseError(f"entries for '{name}' must be a list", path=source)

        parsed = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise ParseError(f"entry for '{name}' must be a mapping", path=source)
            version = entry.get("version")
            url = entry.get("url")
            if not version or not url:
                raise ParseError(
                    f"entry for '{name}' requires 'version' and 'url'", path=source
                )
            parsed.append(Resource(name=str(name), version=str(version), url=str(url)))

        resources[str(name)] = parsed

    return resources


class ResourceCatalog:
    """
    Cached name -> version -> URL mapping.

    Example:
        >>> catalog = ResourceCatalog.open(Path("~/.gobindkit/resources.json"), url)
        >>> go = catalog.get("go", "1.12.4")
        >>> print(go.url)
    """

    def __init__(self, path: Path, ttl_seconds: int = CATALOG_TTL_SECONDS):
        self.path = Path(path)
        self.ttl_seconds = ttl_seconds
        self._resources: Dict[str, List[Resource]] = {}

    @classmethod
    def open(cls, path: Path, url: str) -> "ResourceCatalog":
        """Refresh the snapshot if needed and load it."""
        catalog = cls(path)
        catalog.refresh(url)
        catalog.load()
        return catalog

    def is_stale(self) -> bool:
        """True if the snapshot is missing or older than the time-to-live."""
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            return True
        return time.time() - mtime > self.ttl_seconds

    def refresh(self, url: str) -> bool:
        """
        Re-download the snapshot if it is missing or stale.

        The old snapshot is deleted before fetching; a failed fetch therefore
        leaves no snapshot behind rather than stale data.

        Returns:
            True if a fetch happened, False if the snapshot was fresh

        Raises:
            FetchError: If the catalog cannot be downloaded
            ParseError: If the downloaded content is not a valid catalog
        """
        if not self.is_stale():
            logger.debug(f"Resource catalog is up to date: {self.path}")
            return False

        logger.info(f"Downloading resource catalog from {url}")
        remove_quietly(self.path)

        data = fetch_bytes(url)
        try:
            parse_catalog(json.loads(data), source=url)
        except ValueError as e:
            raise ParseError(f"invalid catalog JSON: {e}", path=url) from e

        atomic_write(self.path, data)
        logger.debug(f"Updated resource catalog: {self.path}")
        return True

    def load(self) -> Dict[str, List[Resource]]:
        """
        Parse the snapshot file.

        Raises:
            ParseError: If the file is unreadable or malformed
        """
        logger.debug(f"Parsing resource catalog {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            raise ParseError(f"invalid catalog JSON: {e}", path=self.path) from e
        except OSError as e:
            raise ParseError(f"cannot read catalog: {e}", path=self.path) from e

        self._resources = parse_catalog(data, source=self.path)
        return self._resources

    @property
    def resources(self) -> Dict[str, List[Resource]]:
        return self._resources

    def names(self) -> List[str]:
        return list(self._resources)

    def versions(self, name: str) -> List[str]:
        return [r.version for r in self._resources.get(name, [])]

    def get(self, name: str, version: str) -> Resource:
        """
        Look up a resource.

        Raises:
            ResourceNotFoundError: If no entry matches name and version
        """
        for resource in self._resources.get(name, []):
            if resource.version == version:
                return resource
        raise ResourceNotFoundError(name, version, available=self.versions(name))
