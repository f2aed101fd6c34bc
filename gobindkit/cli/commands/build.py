"""
Build command implementation.

Runs the full pipeline for a configuration file: toolchains, gomobile,
module resolution, workspace assembly and ``gomobile bind``.
"""

import logging

from gobindkit.build.gomobile import TARGET_ALL
from gobindkit.cli.utils import resolve_base_dir, resolve_resources_url
from gobindkit.config.parser import parse_config
from gobindkit.pipeline import BuildOptions, BuildPipeline, Stage

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = parse_config(args.config)
    logger.debug(f"Configuration: {config}")

    options = BuildOptions(
        home_dir=args.home_dir,
        base_dir=resolve_base_dir(args),
        resources_url=resolve_resources_url(args),
        clear_workspace=args.clear_workspace,
        targets=args.targets or [TARGET_ALL],
    )
    logger.debug(f"Build directory: {options.home_dir / config.name}")

    until = Stage.WORKSPACE_ASSEMBLED if args.no_compile else Stage.COMPILED
    result = BuildPipeline(config, options).run(until=until)

    if args.no_compile:
        logger.info(f"Workspace ready: {result.build_dir / 'go'}")
    for output in result.outputs:
        logger.info(f"Built {output}")

    return 0
