"""
Module manifest (``go.mod``) and vendor manifest (``vendor/modules.txt``) parsing.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from gobindkit.core.exceptions import ManifestMissingError, ParseError
from gobindkit.modules.versions import ModuleVersion

logger = logging.getLogger(__name__)

MODULE_MANIFEST = "go.mod"
VENDOR_DIR = "vendor"
VENDOR_MANIFEST = "modules.txt"


@dataclass(frozen=True)
class VendoredModule:
    """A dependency as recorded by ``go mod vendor``."""

    name: str
    """Module path, e.g. github.com/pkg/errors"""

    version: ModuleVersion
    """Required version (the left-hand side of a replacement)"""

    local_path: Path
    """Directory of the vendored source tree"""

    replacement: Optional[str] = None
    """Replacement target when the module is redirected with ``=>``"""


def read_module_name(module_root: Path) -> str:
    """
    Read the canonical module path from ``<module_root>/go.mod``.

    Raises:
        ManifestMissingError: If there is no go.mod or it declares no module
    """
    manifest = Path(module_root) / MODULE_MANIFEST
    try:
        text = manifest.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestMissingError(module_root, str(e)) from e

    for raw in text.splitlines():
        line = raw.split("//", 1)[0].strip()
        if not line.startswith("module"):
            continue
        parts = line.split(None, 1)
        if parts[0] != "module" or len(parts) != 2:
            continue
        name = parts[1].strip().strip('"').strip("`")
        if name:
            return name

    raise ManifestMissingError(module_root, "no module directive in go.mod")


def parse_vendor_manifest(path: Path) -> List[VendoredModule]:
    """
    Parse ``vendor/modules.txt`` into records, in file order.

    Only ``# <path> <version>`` headers followed by at least one package line
    describe vendored modules. Headers without packages (explicit requirements
    that contribute no code) and ``# <path> => <replacement>`` lines for unused
    replacements have no tree under ``vendor/`` and are skipped. ``## ...``
    markers are ignored.

    Raises:
        ParseError: If the file cannot be read or a module line is malformed
    """
    path = Path(path)
    vendor_dir = path.parent

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"cannot read vendor manifest: {e}", path=path) from e

    modules = []
    header = None
    vendored = False

    def flush():
        if header is None:
            return
        if vendored:
            modules.append(header)
        else:
            logger.debug(f"{header.name} {header.version} has no vendored packages")

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("##"):
            continue
        if not line.startswith("# "):
            vendored = True
            continue

        fields = line[2:].split()
        if len(fields) >= 3 and fields[1] == "=>":
            logger.debug(f"Skipping unused replacement: {line}")
            continue
        if len(fields) < 2 or fields[1] == "=>":
            raise ParseError(f"module line without version: {raw!r}", path=path, line=number)

        name, version_text = fields[0], fields[1]
        replacement = None
        if len(fields) > 2:
            if fields[2] != "=>" or len(fields) < 4:
                raise ParseError(f"malformed module line: {raw!r}", path=path, line=number)
            replacement = " ".join(fields[3:])

        try:
            version = ModuleVersion(version_text)
        except ParseError as e:
            raise ParseError(str(e), path=path, line=number) from e

        flush()
        header = VendoredModule(
            name=name,
            version=version,
            local_path=vendor_dir / name,
            replacement=replacement,
        )
        vendored = False

    flush()
    logger.debug(f"Parsed {len(modules)} vendored modules from {path}")
    return modules
