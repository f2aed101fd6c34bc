"""
GobindKit CLI argument parser.

This module implements the command-line interface for GobindKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gobindkit.build.gomobile import KNOWN_TARGETS, TARGET_ALL
from gobindkit.cli.utils import RESOURCES_URL_ENV_VAR
from gobindkit.config.parser import DEFAULT_CONFIG_NAME
from gobindkit.core.directory import get_home_dir

try:
    from importlib.metadata import version

    __version__ = version("gobindkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """GobindKit command-line interface."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="gobindkit",
            description="GobindKit - reproducible gomobile builds for Go modules",
            epilog='Use "gobindkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"GobindKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--home-dir",
            type=Path,
            metavar="DIR",
            default=get_home_dir(),
            help="Cache and workspace directory (default: ~/.gobindkit)",
        )
        parser.add_argument(
            "--resources-url",
            metavar="URL",
            help=f"Resource catalog URL (default: ${RESOURCES_URL_ENV_VAR})",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_build_command(subparsers)
        self._add_resources_command(subparsers)

        return parser

    def _add_build_command(self, subparsers):
        """Add 'build' subcommand."""
        parser = subparsers.add_parser(
            "build",
            help="Provision toolchains, assemble the workspace and bind",
            description="Run the gomobile build described by a configuration file",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            default=Path(DEFAULT_CONFIG_NAME),
            help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_NAME})",
        )
        parser.add_argument(
            "--base-dir",
            type=Path,
            metavar="DIR",
            help="Directory module and output paths are relative to "
            "(default: directory of the configuration file)",
        )
        parser.add_argument(
            "--clear-workspace",
            action="store_true",
            help="Delete the project workspace before building",
        )
        parser.add_argument(
            "--target",
            dest="targets",
            action="append",
            choices=KNOWN_TARGETS,
            metavar="TARGET",
            help=f"Build target, repeatable: {', '.join(KNOWN_TARGETS)} "
            f"(default: {TARGET_ALL})",
        )
        parser.add_argument(
            "--no-compile",
            action="store_true",
            help="Stop once the workspace is assembled",
        )

    def _add_resources_command(self, subparsers):
        """Add 'resources' subcommand."""
        parser = subparsers.add_parser(
            "resources",
            help="List downloadable toolchain versions",
            description="Refresh the resource catalog if needed and list its entries",
        )
        parser.add_argument(
            "name", nargs="?", help="Only list versions of this resource"
        )

    def parse_args(self, args: Optional[List[str]] = None):
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """Configure logging based on verbose/quiet flags."""
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(level=level, format=format_str, force=True)

    def _dispatch_command(self, args) -> int:
        """Import the command module and call its run()."""
        command_map = {
            "build": "gobindkit.cli.commands.build",
            "resources": "gobindkit.cli.commands.resources",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
