"""gomobile installation and bind invocations."""

from gobindkit.build.gomobile import (
    KNOWN_TARGETS,
    TARGET_ALL,
    TARGET_ANDROID,
    TARGET_IOS,
    compile_gomobile,
    has_android_build,
    has_ios_build,
    prepare_gomobile,
)

__all__ = [
    "KNOWN_TARGETS",
    "TARGET_ALL",
    "TARGET_ANDROID",
    "TARGET_IOS",
    "compile_gomobile",
    "has_android_build",
    "has_ios_build",
    "prepare_gomobile",
]
