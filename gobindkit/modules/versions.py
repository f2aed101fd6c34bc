"""
Go module version parsing and ordering.

Go module versions are semantic versions with a mandatory ``v`` prefix:
``v1.2.3``, ``v1.3.0-rc.1``, pseudo-versions such as
``v0.0.0-20190425145619-16072639606e`` and ``v2.1.0+incompatible``.
Ordering follows semantic version precedence; build metadata (``+...``) is
ignored, so ``v2.1.0+incompatible`` and ``v2.1.0`` compare equal.
"""

import re
from typing import Tuple, Union

from gobindkit.core.exceptions import ParseError

_VERSION_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)"
    r"(?:\.(?P<minor>0|[1-9]\d*))?"
    r"(?:\.(?P<patch>0|[1-9]\d*))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


class ModuleVersion:
    """
    Semantic version parser and comparator for Go modules.

    Example:
        >>> ModuleVersion("v1.2.0") > ModuleVersion("v1.0.0")
        True
        >>> ModuleVersion("v1.0.0-rc.1") < ModuleVersion("v1.0.0")
        True
    """

    def __init__(self, version_string: str):
        """
        Parse version string.

        Raises:
            ParseError: If the string is not a semantic version
        """
        self.original = version_string
        match = _VERSION_RE.match(version_string.strip())
        if not match:
            raise ParseError(f"Invalid module version: {version_string!r}")

        self.major = int(match.group("major"))
        self.minor = int(match.group("minor") or 0)
        self.patch = int(match.group("patch") or 0)
        self.prerelease = match.group("prerelease") or ""
        self.build = match.group("build") or ""

    @property
    def _key(self) -> Tuple:
        if not self.prerelease:
            release: Tuple = (1,)
        else:
            identifiers = tuple(
                (0, int(part), "") if part.isdigit() else (1, 0, part)
                for part in self.prerelease.split(".")
            )
            release = (0, identifiers)
        return (self.major, self.minor, self.patch, release)

    def is_newer(self, other: "ModuleVersion") -> bool:
        """True if this version strictly outranks other."""
        return self > other

    def __lt__(self, other: "ModuleVersion") -> bool:
        return self._key < other._key

    def __le__(self, other: "ModuleVersion") -> bool:
        return self._key <= other._key

    def __gt__(self, other: "ModuleVersion") -> bool:
        return self._key > other._key

    def __ge__(self, other: "ModuleVersion") -> bool:
        return self._key >= other._key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleVersion):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self.original

    def __repr__(self) -> str:
        return f"ModuleVersion({self.original!r})"


def parse_version(value: Union[str, ModuleVersion]) -> ModuleVersion:
    """Coerce a string into a ModuleVersion."""
    if isinstance(value, ModuleVersion):
        return value
    return ModuleVersion(value)
