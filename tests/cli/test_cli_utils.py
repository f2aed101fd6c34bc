"""
Tests for CLI utility functions.
"""

from argparse import Namespace
from pathlib import Path

import pytest

from gobindkit.cli.utils import resolve_base_dir, resolve_resources_url
from gobindkit.core.exceptions import ConfigError


class TestResolveResourcesUrl:
    def test_argument_wins(self, monkeypatch):
        monkeypatch.setenv("GOBINDKIT_RESOURCES_URL", "https://env/r.json")

        args = Namespace(resources_url="https://arg/r.json")

        assert resolve_resources_url(args) == "https://arg/r.json"

    def test_environment_fallback(self, monkeypatch):
        monkeypatch.setenv("GOBINDKIT_RESOURCES_URL", "https://env/r.json")

        assert resolve_resources_url(Namespace(resources_url=None)) == "https://env/r.json"

    def test_missing(self, monkeypatch):
        monkeypatch.delenv("GOBINDKIT_RESOURCES_URL", raising=False)

        with pytest.raises(ConfigError, match="--resources-url"):
            resolve_resources_url(Namespace(resources_url=None))


class TestResolveBaseDir:
    def test_explicit(self, tmp_path):
        args = Namespace(base_dir=tmp_path / "base", config=Path("gobindkit.yaml"))

        assert resolve_base_dir(args) == (tmp_path / "base").resolve()

    def test_config_directory(self, tmp_path):
        args = Namespace(base_dir=None, config=tmp_path / "proj" / "gobindkit.yaml")

        assert resolve_base_dir(args) == (tmp_path / "proj").resolve()
