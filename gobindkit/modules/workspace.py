"""
Workspace assembly: hoist winning dependencies into one flat GOPATH.

After resolution every staged module carries its own ``vendor/`` tree. The
assembler moves the winning copy of each dependency to
``$GOPATH/src/<module path>`` and then deletes the per-module vendor trees,
so the GOPATH contains exactly one definition of every package.

Target directories are removed and rebuilt rather than merged, so repeated
runs with an unchanged configuration produce the same layout.
"""

import logging
from pathlib import Path
from typing import Iterable, List

from gobindkit.core import filesystem
from gobindkit.modules.dependencies import DependencySet
from gobindkit.modules.resolver import ResolutionResult, ResolvedModule

logger = logging.getLogger(__name__)


class WorkspaceAssembler:
    """
    Lays out the shared source root of a GOPATH.

    Example:
        >>> assembler = WorkspaceAssembler(gopath / "src")
        >>> assembler.assemble(resolver.resolve(specifiers))
    """

    def __init__(self, src_root: Path):
        self.src_root = Path(src_root)

    def target_for(self, name: str) -> Path:
        return self.src_root / name

    def promote(
        self, dependencies: DependencySet, modules: Iterable[ResolvedModule] = ()
    ) -> List[Path]:
        """
        Move every winning dependency out of its vendor tree into the workspace.

        All winners are first pulled out into a holding directory, so clearing
        one target can never delete the vendor tree of another winner (a
        dependency may share its path with a staged module). Nested modules
        are pulled out before their parents and laid down after them.

        A staged module whose root lies inside a promoted target is replaced
        by the vendored copy; this is logged as a warning.

        Returns:
            The workspace directories that were populated

        Raises:
            FileSystemError: If removing the old copy or moving fails
        """
        ordered = list(dependencies.in_path_order())
        holding = self.src_root.parent / ".promote"
        filesystem.remove_tree(holding)

        held = {}
        for index, dependency in reversed(list(enumerate(ordered))):
            parked = holding / str(index)
            filesystem.move_tree(dependency.local_path, parked)
            held[dependency.name] = parked

        staged_roots = [module.local_path for module in modules]
        promoted = []
        for dependency in ordered:
            target = self.target_for(dependency.name)
            for root in staged_roots:
                if root.is_relative_to(target):
                    logger.warning(
                        f"Promoting {dependency.name} {dependency.version} "
                        f"replaces staged module sources at {root}"
                    )
            filesystem.remove_tree(target)
            logger.debug(f"move {dependency.local_path} -> {target}")
            filesystem.move_tree(held[dependency.name], target)
            promoted.append(target)

        filesystem.remove_tree(holding)
        logger.info(f"Promoted {len(promoted)} dependencies into {self.src_root}")
        return promoted

    def cleanup(self, modules: Iterable[ResolvedModule]) -> None:
        """
        Delete the vendor tree of every staged module.

        Raises:
            FileSystemError: If a vendor tree cannot be removed
        """
        for module in modules:
            vendor = module.vendor_path
            logger.debug(f"remove {vendor}")
            filesystem.remove_tree(vendor)

    def assemble(self, resolution: ResolutionResult) -> List[Path]:
        """Promote the merged dependencies, then clean up the module copies."""
        promoted = self.promote(resolution.dependencies, resolution.modules)
        self.cleanup(resolution.modules)
        return promoted
