"""
Pytest configuration and shared fixtures for GobindKit tests.
"""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from gobindkit.core.environment import CommandResult, EnvironmentContext


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access or a go toolchain",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """GobindKit home directory inside tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("GOBINDKIT_HOME", str(home))
    return home


@pytest.fixture
def catalog_data() -> Dict[str, List[Dict[str, str]]]:
    """Catalog content with one entry per default toolchain."""
    return {
        "go": [
            {"version": "1.12.4", "url": "https://example.com/go1.12.4.tar.gz"},
            {"version": "1.13", "url": "https://example.com/go1.13.tar.gz"},
        ],
        "ndk": [{"version": "r19c", "url": "https://example.com/ndk-r19c.zip"}],
        "sdk": [{"version": "433796", "url": "https://example.com/sdk-433796.zip"}],
    }


@pytest.fixture
def catalog_file(isolated_home: Path, catalog_data) -> Path:
    """A fresh catalog snapshot in the isolated home."""
    path = isolated_home / "resources.json"
    path.write_text(json.dumps(catalog_data))
    return path


@pytest.fixture
def write_module() -> Callable[..., Path]:
    """
    Factory writing a Go module directory.

    Usage:
        write_module(root, "example.com/app", vendor={"github.com/pkg/errors": "v0.8.1"})
    """

    def _write(
        root: Path,
        name: str,
        vendor: Optional[Dict[str, str]] = None,
        files: Optional[Dict[str, str]] = None,
    ) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        (root / "go.mod").write_text(f"module {name}\n\ngo 1.12\n")
        (root / "main.go").write_text("package main\n")
        for relative, content in (files or {}).items():
            (root / relative).parent.mkdir(parents=True, exist_ok=True)
            (root / relative).write_text(content)
        if vendor is not None:
            write_vendor(root, vendor)
        return root

    return _write


def write_vendor(module_root: Path, dependencies: Dict[str, str]) -> None:
    """Create vendor/modules.txt and one source file per dependency."""
    vendor = module_root / "vendor"
    vendor.mkdir(parents=True, exist_ok=True)
    lines = []
    for name, version in dependencies.items():
        lines += [f"# {name} {version}", "## explicit", name]
        package_dir = vendor / name
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "VERSION").write_text(version)
    (vendor / "modules.txt").write_text("\n".join(lines) + "\n")


@pytest.fixture
def vendor_writer() -> Callable[[Path, Dict[str, str]], None]:
    return write_vendor


@pytest.fixture
def recorded_commands(monkeypatch) -> List[CommandResult]:
    """
    Replace EnvironmentContext.run with a recorder.

    Every call is appended as a CommandResult carrying the cwd in its lines;
    a handler may be registered with ``recorded_commands.handlers[binary]``
    to emulate side effects of a command.
    """

    class Recorder(list):
        def __init__(self):
            super().__init__()
            self.handlers: Dict[str, Callable] = {}
            self.calls = []

    recorder = Recorder()

    def fake_run(self, binary, *args, check=False):
        command = [str(binary), *[str(a) for a in args]]
        recorder.calls.append((command, self.cwd, self.variables))
        handler = recorder.handlers.get(str(binary))
        if handler is not None:
            handler(self, command)
        result = CommandResult(command=command, returncode=0, lines=[])
        recorder.append(result)
        return result

    monkeypatch.setattr(EnvironmentContext, "run", fake_run)
    return recorder


@pytest.fixture
def environment(tmp_path: Path) -> EnvironmentContext:
    """A minimal environment with a PATH and cwd."""
    return EnvironmentContext({"PATH": "/usr/bin:/bin", "HOME": str(tmp_path)}, cwd=tmp_path)
