"""
Process environment and external command execution.

EnvironmentContext holds the variables and working directory that external
programs (go, gomobile, which, ...) are launched with. The pipeline threads
one context through its stages, taking a snapshot per stage so a failing
stage never leaks half-applied variables into later ones.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from gobindkit.core.exceptions import ProcessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished external command."""

    command: List[str]
    """Binary followed by its arguments"""

    returncode: int
    """Process exit status"""

    lines: List[str] = field(default_factory=list)
    """Combined stdout/stderr, one entry per line, in output order"""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


class EnvironmentContext:
    """
    Ordered environment variables plus a working directory.

    Example:
        >>> env = EnvironmentContext.from_os_environ()
        >>> env.set("GO111MODULE", "on")
        >>> env.chdir(Path("/tmp"))
        >>> result = env.run("go", "version")
        >>> print(result.lines[0])
    """

    def __init__(
        self,
        variables: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ):
        self._variables: Dict[str, str] = dict(variables or {})
        self._cwd = Path(cwd) if cwd is not None else None

    @classmethod
    def from_os_environ(cls) -> "EnvironmentContext":
        """Create a context seeded with the variables this process was launched with."""
        return cls(os.environ, cwd=Path.cwd())

    @property
    def cwd(self) -> Optional[Path]:
        return self._cwd

    @property
    def variables(self) -> Dict[str, str]:
        """A copy of the current variables, in insertion order."""
        return dict(self._variables)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._variables.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._variables

    def set(self, key: str, value: Union[str, Path]) -> None:
        """Upsert a variable."""
        self._variables[key] = str(value)
        logger.debug(f"export {key}={value}")

    def prepend_path(self, *directories: Union[str, Path]) -> None:
        """Put directories in front of PATH, first argument first."""
        entries = [str(d) for d in directories]
        current = self._variables.get("PATH")
        if current:
            entries.append(current)
        self.set("PATH", os.pathsep.join(entries))

    def chdir(self, path: Union[str, Path]) -> None:
        """
        Change the directory subsequent commands run in.

        The path is not validated; a missing directory surfaces when the next
        command is spawned.
        """
        self._cwd = Path(path)
        logger.debug(f"cd {path}")

    def snapshot(self) -> "EnvironmentContext":
        """Return an independent copy of this context."""
        return EnvironmentContext(self._variables, cwd=self._cwd)

    def run(self, binary: str, *args: str, check: bool = False) -> CommandResult:
        """
        Run a command to completion and capture its combined output.

        Blocks until the process exits. Every output line is logged, at error
        level when the command failed.

        Args:
            binary: Program name (looked up on this context's PATH) or path
            *args: Program arguments
            check: Raise ProcessError on a nonzero exit status

        Returns:
            CommandResult with the captured lines and exit status

        Raises:
            ProcessError: If the process cannot be spawned, or exits nonzero
                with check=True
        """
        command = [str(binary), *[str(a) for a in args]]
        logger.debug(f"exec {' '.join(command)} (cwd={self._cwd})")

        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=dict(self._variables),
                cwd=str(self._cwd) if self._cwd is not None else None,
            )
        except OSError as e:
            raise ProcessError(
                f"Failed to execute {' '.join(command)}: {e}", command=command
            ) from e

        lines = completed.stdout.decode("utf-8", errors="replace").splitlines()
        result = CommandResult(
            command=command, returncode=completed.returncode, lines=lines
        )

        for line in lines:
            if result.success:
                logger.info(line)
            else:
                logger.error(line)

        if check and not result.success:
            raise ProcessError(
                f"Command failed with exit code {result.returncode}: "
                f"{' '.join(command)}",
                command=command,
                returncode=result.returncode,
                output=lines,
            )

        return result

    def __repr__(self) -> str:
        return f"EnvironmentContext(cwd={self._cwd!r}, variables={len(self._variables)})"
