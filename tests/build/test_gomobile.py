"""
Tests for gomobile installation and bind invocations.
"""

import pytest

from gobindkit.build.gomobile import (
    GOMOBILE_PACKAGE,
    TARGET_ALL,
    TARGET_ANDROID,
    TARGET_IOS,
    android_bind_args,
    compile_gomobile,
    has_android_build,
    has_ios_build,
    ios_bind_args,
    prepare_gomobile,
)
from gobindkit.config.parser import (
    AndroidBuild,
    BuildConfiguration,
    BuildSection,
    GomobileBuild,
    IosBuild,
)
from gobindkit.core.exceptions import ProcessError


def make_config(android=None, ios=None, export=("example.com/app/api",)):
    return BuildConfiguration(
        name="mylib",
        build=BuildSection(
            gomobile=GomobileBuild(android=android, ios=ios, export=list(export))
        ),
    )


class TestPlatformSelection:
    @pytest.mark.parametrize(
        "targets,expected",
        [
            ([TARGET_ALL], True),
            ([TARGET_ANDROID], True),
            ([TARGET_IOS], False),
            ([], False),
        ],
    )
    def test_android_by_target(self, targets, expected):
        assert has_android_build(make_config(android=AndroidBuild()), targets) is expected

    def test_android_needs_section(self):
        assert not has_android_build(make_config(ios=IosBuild()), [TARGET_ALL])

    def test_no_gomobile_section(self):
        config = BuildConfiguration(name="mylib")

        assert not has_android_build(config, [TARGET_ALL])
        assert not has_ios_build(config, [TARGET_ALL])

    @pytest.mark.parametrize(
        "targets,expected",
        [([TARGET_ALL], True), ([TARGET_IOS], True), ([TARGET_ANDROID], False)],
    )
    def test_ios_by_target(self, targets, expected):
        assert has_ios_build(make_config(ios=IosBuild()), targets) is expected

    def test_ios_disabled(self):
        config = make_config(ios=IosBuild(disabled=True))

        assert not has_ios_build(config, [TARGET_ALL])


class TestBindArguments:
    def test_android_arguments(self, tmp_path):
        config = make_config(
            android=AndroidBuild(
                javapkg="com.example", out="out/mylib.aar", ldflags="-s -w"
            )
        )

        args = android_bind_args(config, tmp_path)

        assert args == [
            "bind",
            "-v",
            "-o",
            str((tmp_path / "out" / "mylib.aar").resolve()),
            "-javapkg",
            "com.example",
            "-ldflags",
            "-s -w",
            "-target=android",
            "example.com/app/api",
        ]

    def test_android_default_output(self, tmp_path):
        args = android_bind_args(make_config(android=AndroidBuild()), tmp_path)

        assert args[3] == str((tmp_path / "mylib.aar").resolve())
        assert "-javapkg" not in args

    def test_ios_arguments(self, tmp_path):
        config = make_config(
            ios=IosBuild(prefix="ML", out="/abs/Mylib.framework", bundleid="com.example")
        )

        args = ios_bind_args(config, tmp_path)

        assert args == [
            "bind",
            "-v",
            "-o",
            "/abs/Mylib.framework",
            "-prefix",
            "ML",
            "-bundleid",
            "com.example",
            "-target=ios",
            "example.com/app/api",
        ]


class TestPrepareGomobile:
    def test_installs_when_missing(self, environment, recorded_commands, tmp_path):
        gopath = tmp_path / "go"

        binary = prepare_gomobile(environment, gopath)

        assert binary == gopath / "bin" / "gomobile"
        assert [r.command for r in recorded_commands] == [
            ["go", "get", "-u", GOMOBILE_PACKAGE],
            ["bin/gomobile", "version"],
            ["bin/gomobile", "init"],
        ]
        assert all(cwd == gopath for _, cwd, _ in recorded_commands.calls)
        assert environment.get("GO111MODULE") == "off"

    def test_skips_when_installed(self, environment, recorded_commands, tmp_path):
        gopath = tmp_path / "go"
        (gopath / "bin").mkdir(parents=True)
        (gopath / "bin" / "gomobile").write_text("")

        prepare_gomobile(environment, gopath)

        assert list(recorded_commands) == []

    def test_failure_names_step(self, environment, recorded_commands, tmp_path):
        def gomobile(env, command):
            if command[1] == "init":
                raise ProcessError("exit 1", command=command, returncode=1)

        recorded_commands.handlers["bin/gomobile"] = gomobile

        with pytest.raises(ProcessError, match="Failed to init gomobile") as exc_info:
            prepare_gomobile(environment, tmp_path / "go")

        assert exc_info.value.returncode == 1


class TestCompileGomobile:
    def test_binds_every_active_platform(self, environment, recorded_commands, tmp_path):
        config = make_config(android=AndroidBuild(), ios=IosBuild())
        gopath = tmp_path / "go"

        outputs = compile_gomobile(config, [TARGET_ALL], environment, gopath, tmp_path)

        assert outputs == [
            (tmp_path / "mylib.aar").resolve(),
            (tmp_path / "mylib.framework").resolve(),
        ]
        commands = [r.command for r in recorded_commands]
        assert commands[0][:2] == ["bin/gomobile", "bind"]
        assert "-target=android" in commands[0]
        assert "-target=ios" in commands[1]
        assert environment.cwd == gopath
        assert environment.get("GO111MODULE") == "off"

    def test_only_selected_target(self, environment, recorded_commands, tmp_path):
        config = make_config(android=AndroidBuild(), ios=IosBuild())

        outputs = compile_gomobile(config, [TARGET_IOS], environment, tmp_path, tmp_path)

        assert outputs == [(tmp_path / "mylib.framework").resolve()]
        assert len(recorded_commands) == 1

    def test_nothing_selected(self, environment, recorded_commands, tmp_path, caplog):
        config = make_config(ios=IosBuild(disabled=True))

        outputs = compile_gomobile(config, [TARGET_ALL], environment, tmp_path, tmp_path)

        assert outputs == []
        assert list(recorded_commands) == []
        assert "nothing to compile" in caplog.text

    def test_bind_failure_propagates(self, environment, recorded_commands, tmp_path):
        def gomobile(env, command):
            raise ProcessError("exit 1", command=command, returncode=1)

        recorded_commands.handlers["bin/gomobile"] = gomobile

        with pytest.raises(ProcessError):
            compile_gomobile(
                make_config(android=AndroidBuild()),
                [TARGET_ALL],
                environment,
                tmp_path,
                tmp_path,
            )
