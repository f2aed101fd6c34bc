"""
Go module handling for GobindKit.

This module provides functionality for:
- Parsing go.mod and vendor/modules.txt
- Comparing module versions
- Merging vendored dependencies across modules
- Staging modules and assembling the shared GOPATH
"""

from gobindkit.modules.dependencies import DependencySet, merge_dependencies
from gobindkit.modules.manifest import (
    VendoredModule,
    parse_vendor_manifest,
    read_module_name,
)
from gobindkit.modules.resolver import (
    ModuleResolver,
    ResolutionResult,
    ResolvedModule,
)
from gobindkit.modules.versions import ModuleVersion, parse_version
from gobindkit.modules.workspace import WorkspaceAssembler

__all__ = [
    "DependencySet",
    "ModuleResolver",
    "ModuleVersion",
    "ResolutionResult",
    "ResolvedModule",
    "VendoredModule",
    "WorkspaceAssembler",
    "merge_dependencies",
    "parse_vendor_manifest",
    "parse_version",
    "read_module_name",
]
