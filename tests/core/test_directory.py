"""Tests for the home and build directory layout."""

from pathlib import Path

from gobindkit.core.directory import (
    get_build_dir,
    get_catalog_path,
    get_downloads_dir,
    get_gopath,
    get_home_dir,
    get_toolchains_dir,
)


class TestHomeDir:
    def test_default_is_in_user_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("GOBINDKIT_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        assert get_home_dir() == tmp_path / ".gobindkit"

    def test_environment_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GOBINDKIT_HOME", str(tmp_path / "custom"))

        assert get_home_dir() == tmp_path / "custom"


class TestLayout:
    def test_paths_below_home(self, tmp_path):
        assert get_catalog_path(tmp_path) == tmp_path / "resources.json"
        assert get_toolchains_dir(tmp_path) == tmp_path / "toolchains"
        assert get_downloads_dir(tmp_path) == tmp_path / "downloads"

    def test_gopath_inside_build_dir(self, tmp_path):
        build_dir = get_build_dir(tmp_path, "mylib")

        assert build_dir == tmp_path / "mylib"
        assert get_gopath(build_dir) == tmp_path / "mylib" / "go"
