"""
Module resolution: locate, stage and vendor every configured module.

For each module specifier, in declaration order:

1. resolve it to a directory (an existing local path, otherwise ``go get``
   into the GOPATH module cache),
2. read the module path from its go.mod,
3. copy it to ``$GOPATH/src/<module path>``, replacing any earlier copy,
4. run ``go mod vendor`` inside the copy,
5. parse ``vendor/modules.txt``.

The vendored records of all modules are folded into one DependencySet.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from gobindkit.core import filesystem
from gobindkit.core.environment import EnvironmentContext
from gobindkit.core.exceptions import (
    FileSystemError,
    GobindKitError,
    ManifestMissingError,
    ParseError,
    ProcessError,
)
from gobindkit.modules.dependencies import DependencySet, merge_dependencies
from gobindkit.modules.manifest import (
    VENDOR_DIR,
    VENDOR_MANIFEST,
    VendoredModule,
    parse_vendor_manifest,
    read_module_name,
)
from gobindkit.modules.versions import ModuleVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedModule:
    """A configured module after it was staged and vendored."""

    specifier: str
    name: str
    version: Optional[str]
    """Version of a module fetched remotely; None for local working copies"""

    source_path: Path
    local_path: Path
    """Staged copy at $GOPATH/src/<name>"""

    @property
    def vendor_path(self) -> Path:
        return self.local_path / VENDOR_DIR


@dataclass(frozen=True)
class ResolutionResult:
    dependencies: DependencySet
    modules: Tuple[ResolvedModule, ...]


def escape_module_path(path: str) -> str:
    """
    Apply the module cache case encoding.

    The module cache stores ``github.com/BurntSushi/toml`` as
    ``github.com/!burnt!sushi/toml`` so paths survive case-insensitive file
    systems.
    """
    return "".join(f"!{c.lower()}" if c.isupper() else c for c in path)


class ModuleResolver:
    """
    Stages configured modules into a GOPATH and collects their dependencies.

    Example:
        >>> resolver = ModuleResolver(env, gopath=build_dir / "go", base_dir=project_dir)
        >>> result = resolver.resolve(["./core", "github.com/org/lib@v1.2.0"])
        >>> for dep in result.dependencies.values():
        ...     print(dep.name, dep.version)
    """

    def __init__(self, env: EnvironmentContext, gopath: Path, base_dir: Path):
        self.env = env
        self.gopath = Path(gopath)
        self.base_dir = Path(base_dir)

    @property
    def src_root(self) -> Path:
        return self.gopath / "src"

    @property
    def module_cache(self) -> Path:
        return self.gopath / "pkg" / "mod"

    def resolve(self, specifiers: Sequence[str]) -> ResolutionResult:
        """
        Resolve all specifiers and merge their vendored dependencies.

        Raises:
            ManifestMissingError: If a module has no go.mod
            ProcessError: If go get or go mod vendor fails
            ParseError: If a vendor manifest is malformed
            FileSystemError: If staging a module fails
        """
        self.env.chdir(self.gopath)
        self.env.set("GO111MODULE", "on")

        dependencies = DependencySet()
        modules: List[ResolvedModule] = []
        for specifier in specifiers:
            try:
                module, records = self.resolve_module(specifier)
            except GobindKitError:
                logger.error(f"Failed to resolve module {specifier}")
                raise
            modules.append(module)
            dependencies = merge_dependencies(records, dependencies)

        logger.info(
            f"Resolved {len(modules)} modules with {len(dependencies)} dependencies"
        )
        return ResolutionResult(dependencies=dependencies, modules=tuple(modules))

    def resolve_module(self, specifier: str) -> Tuple[ResolvedModule, List[VendoredModule]]:
        """Locate, stage and vendor a single module."""
        source, version = self.locate(specifier)
        logger.debug(f"processing {specifier} from {source}")

        name = read_module_name(source)
        logger.debug(f"module name {name}")

        target = self.src_root / name
        self._stage(source, target)

        self.env.chdir(target)
        try:
            self.env.run("go", "mod", "vendor", check=True)
        except ProcessError as e:
            raise ProcessError(
                f"Failed to vendor dependencies of {name}: {e}",
                command=e.command,
                returncode=e.returncode,
                output=e.output,
            ) from e

        manifest = target / VENDOR_DIR / VENDOR_MANIFEST
        if manifest.exists():
            records = parse_vendor_manifest(manifest)
        elif (target / VENDOR_DIR).exists():
            raise ParseError("vendor directory without modules.txt", path=manifest)
        else:
            logger.debug(f"{name} has no dependencies to vendor")
            records = []

        module = ResolvedModule(
            specifier=specifier,
            name=name,
            version=version,
            source_path=source,
            local_path=target,
        )
        return module, records

    def locate(self, specifier: str) -> Tuple[Path, Optional[str]]:
        """
        Find the directory of a module.

        Existing paths (absolute, or relative to the base directory) are used
        as they are. Anything else is fetched with ``go get`` and looked up in
        the module cache.

        Returns:
            (directory, version) where version is None for local paths
        """
        local = Path(specifier).expanduser()
        if not local.is_absolute():
            local = self.base_dir / local
        if local.exists():
            return local.resolve(), None

        logger.info(f"Fetching remote module {specifier}")
        self.env.chdir(self.gopath)
        self.env.run("go", "get", specifier, check=True)
        return self._find_in_module_cache(specifier)

    def _find_in_module_cache(self, specifier: str) -> Tuple[Path, str]:
        path, _, requested = specifier.partition("@")
        escaped = Path(escape_module_path(path))

        if requested:
            candidate = self.module_cache / f"{escaped}@{escape_module_path(requested)}"
            if candidate.is_dir():
                return candidate, requested

        # No (or a symbolic) version given: take the greatest cached one
        parent = self.module_cache / escaped.parent
        best: Optional[Tuple[ModuleVersion, Path]] = None
        for candidate in parent.glob(f"{escaped.name}@*"):
            if not candidate.is_dir():
                continue
            try:
                version = ModuleVersion(candidate.name.split("@", 1)[1])
            except ParseError:
                continue
            if best is None or version > best[0]:
                best = (version, candidate)

        if best is None:
            raise ManifestMissingError(
                self.module_cache / escaped, "module not found in the module cache"
            )
        return best[1], str(best[0])

    def _stage(self, source: Path, target: Path) -> None:
        """Replace target with a fresh copy of source."""
        resolved_target = target.resolve()
        if resolved_target.is_relative_to(source) or source.is_relative_to(
            resolved_target
        ):
            raise FileSystemError(
                f"Module source {source} overlaps its workspace location {target}"
            )

        logger.debug(f"removing {target}")
        filesystem.remove_tree(target)
        logger.debug(f"copying {source} -> {target}")
        filesystem.copy_tree(source, target)
