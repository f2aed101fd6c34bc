"""
Tests for gobindkit.yaml parsing.
"""

import pytest

from gobindkit.config.parser import (
    DEFAULT_GO_VERSION,
    DEFAULT_NDK_VERSION,
    DEFAULT_SDK_VERSION,
    ConfigError,
    parse_config,
)

FULL_CONFIG = """\
name: mylib
build:
  gomobile:
    toolchain:
      go: 1.13
      ndk: r20
      sdk: 4333796
    ios:
      prefix: ML
      out: ./out/Mylib.framework
      bundleid: com.example.mylib
      ldflags: -s -w
    android:
      javapkg: com.example.mylib
      out: ./out/mylib.aar
    modules:
      - ./core
      - github.com/org/extra@v1.2.0
    export:
      - example.com/core/api
"""


@pytest.fixture
def write_config(tmp_path):
    def _write(content):
        path = tmp_path / "gobindkit.yaml"
        path.write_text(content)
        return path

    return _write


class TestParseConfig:
    def test_full_config(self, write_config):
        config = parse_config(write_config(FULL_CONFIG))

        gomobile = config.build.gomobile
        assert config.name == "mylib"
        assert gomobile.toolchain.go == "1.13"
        assert gomobile.toolchain.ndk == "r20"
        assert gomobile.toolchain.sdk == "4333796"
        assert gomobile.ios.prefix == "ML"
        assert gomobile.ios.ldflags == "-s -w"
        assert gomobile.ios.disabled is False
        assert gomobile.android.javapkg == "com.example.mylib"
        assert gomobile.android.ldflags is None
        assert gomobile.modules == ["./core", "github.com/org/extra@v1.2.0"]
        assert gomobile.export == ["example.com/core/api"]

    def test_toolchain_defaults(self, write_config):
        config = parse_config(write_config("name: mylib\nbuild:\n  gomobile: {}\n"))

        toolchain = config.build.gomobile.toolchain
        assert toolchain.go == DEFAULT_GO_VERSION
        assert toolchain.ndk == DEFAULT_NDK_VERSION
        assert toolchain.sdk == DEFAULT_SDK_VERSION
        assert config.build.gomobile.ios is None
        assert config.build.gomobile.android is None
        assert config.build.gomobile.modules == []

    def test_without_gomobile_section(self, write_config):
        config = parse_config(write_config("name: mylib\n"))

        assert config.build.gomobile is None

    def test_ios_disabled(self, write_config):
        config = parse_config(
            write_config("name: mylib\nbuild:\n  gomobile:\n    ios:\n      disabled: true\n")
        )

        assert config.build.gomobile.ios.disabled is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            parse_config(tmp_path / "missing.yaml")

    def test_empty_file(self, write_config):
        with pytest.raises(ConfigError, match="empty"):
            parse_config(write_config(""))

    def test_invalid_yaml(self, write_config):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_config(write_config("name: [unclosed\n"))

    @pytest.mark.parametrize(
        "content,message",
        [
            ("- a\n- b\n", "must be a mapping"),
            ("build: {}\n", "Missing required field: name"),
            ("name: ../escape\n", "Invalid project name"),
            ("name: mylib\nbuild: []\n", "Section 'build'"),
            ("name: mylib\nbuild:\n  gomobile:\n    modules: ./core\n", "must be a list"),
            ("name: mylib\nbuild:\n  gomobile:\n    android: yes-please\n", "android"),
        ],
    )
    def test_invalid_content(self, write_config, content, message):
        with pytest.raises(ConfigError, match=message):
            parse_config(write_config(content))
