"""
Greatest-version merge of vendored dependencies.

Every module of a build vendors its own copy of its transitive dependencies.
The workspace can only hold one copy per module path, so the records of all
modules are folded into a single DependencySet in which the greatest version
of each dependency wins. Equal versions keep the record seen first.

Incompatible major versions are not detected; the greatest one simply wins.
"""

import logging
from functools import reduce
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional

from gobindkit.modules.manifest import VendoredModule

logger = logging.getLogger(__name__)


class DependencySet(Mapping[str, VendoredModule]):
    """
    Immutable mapping of module path to the winning VendoredModule.

    Example:
        >>> deps = DependencySet().merged(record_a).merged(record_b)
        >>> deps["github.com/pkg/errors"].version
    """

    def __init__(self, entries: Optional[Mapping[str, VendoredModule]] = None):
        self._entries: Mapping[str, VendoredModule] = MappingProxyType(
            dict(entries or {})
        )

    def __getitem__(self, name: str) -> VendoredModule:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def merged(self, record: VendoredModule) -> "DependencySet":
        """
        Return a new set with record applied.

        The record replaces the current entry for its name only when its
        version is strictly newer.
        """
        current = self._entries.get(record.name)
        if current is not None and not record.version.is_newer(current.version):
            return self

        if current is None:
            logger.debug(f"found {record.name} {record.version}")
        else:
            logger.debug(
                f"upgrade {record.name} {current.version} -> {record.version}"
            )

        entries: Dict[str, VendoredModule] = dict(self._entries)
        entries[record.name] = record
        return DependencySet(entries)

    def in_path_order(self) -> Iterator[VendoredModule]:
        """Entries ordered by module path; parents sort before nested modules."""
        for name in sorted(self._entries):
            yield self._entries[name]

    def __repr__(self) -> str:
        pairs = ", ".join(f"{n}@{r.version}" for n, r in self._entries.items())
        return f"DependencySet({pairs})"


def merge_dependencies(
    records: Iterable[VendoredModule], initial: Optional[DependencySet] = None
) -> DependencySet:
    """Fold records into a DependencySet, greatest version winning."""
    return reduce(
        lambda deps, record: deps.merged(record),
        records,
        initial if initial is not None else DependencySet(),
    )
