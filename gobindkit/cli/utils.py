"""
Shared utilities for CLI commands.
"""

import logging
import os
from pathlib import Path

from gobindkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

RESOURCES_URL_ENV_VAR = "GOBINDKIT_RESOURCES_URL"


def resolve_resources_url(args) -> str:
    """
    Pick the catalog URL from --resources-url or the environment.

    Raises:
        ConfigError: If neither is set
    """
    url = getattr(args, "resources_url", None) or os.environ.get(RESOURCES_URL_ENV_VAR)
    if not url:
        raise ConfigError(
            "No resource catalog URL given. "
            f"Use --resources-url or set {RESOURCES_URL_ENV_VAR}."
        )
    return url


def resolve_base_dir(args) -> Path:
    """--base-dir if given, otherwise the directory holding the configuration file."""
    if getattr(args, "base_dir", None):
        return Path(args.base_dir).resolve()
    return Path(args.config).resolve().parent
