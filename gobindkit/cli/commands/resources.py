"""
Resources command implementation.

Lists the toolchain versions known to the resource catalog.
"""

import logging

from gobindkit.cli.utils import resolve_resources_url
from gobindkit.core.directory import get_catalog_path
from gobindkit.toolchain.catalog import ResourceCatalog
from gobindkit.toolchain.provisioner import ToolchainProvisioner

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resources command.

    Returns:
        Exit code (0 for success, 1 if the requested name is unknown)
    """
    catalog = ResourceCatalog.open(
        get_catalog_path(args.home_dir), resolve_resources_url(args)
    )
    provisioner = ToolchainProvisioner(args.home_dir)

    if args.name and args.name not in catalog.resources:
        logger.error(f"Unknown resource: {args.name}")
        return 1

    names = [args.name] if args.name else catalog.names()

    for name in names:
        print(name)
        for resource in catalog.resources[name]:
            marker = "*" if provisioner.is_provisioned(resource) else " "
            print(f"  {marker} {resource.version:<12} {resource.url}")

    return 0
