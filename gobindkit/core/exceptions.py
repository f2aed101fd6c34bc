"""
Centralized exception hierarchy for GobindKit.

Every failure raised by the build pipeline derives from GobindKitError so the
CLI can report it uniformly. Components wrap lower level errors with the
resource, module or step they were working on and chain the original with
``raise ... from``.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class GobindKitError(Exception):
    """Base exception for all GobindKit errors."""

    pass


# ============================================================================
# Network / Parsing
# ============================================================================


class FetchError(GobindKitError):
    """Raised when a catalog snapshot or archive cannot be downloaded."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class ParseError(GobindKitError):
    """Raised when a catalog, manifest or vendor file is malformed."""

    def __init__(self, message: str, path=None, line: int = 0):
        self.path = path
        self.line = line
        if path is not None and line:
            message = f"{path}:{line}: {message}"
        elif path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


# ============================================================================
# Lookup Exceptions
# ============================================================================


class NotFoundError(GobindKitError):
    """Raised when a resource is not known to the catalog."""

    pass


class ResourceNotFoundError(NotFoundError):
    """Raised when a (name, version) pair has no catalog entry."""

    def __init__(self, name: str, version: str, available=None):
        self.name = name
        self.version = version
        self.available = list(available or [])
        msg = f"Resource not found: {name} {version}"
        if self.available:
            msg += f" (known versions: {', '.join(self.available)})"
        super().__init__(msg)


class InvalidResourceError(NotFoundError):
    """Raised when a downloaded resource turns out to be empty or unusable."""

    pass


class ManifestMissingError(GobindKitError):
    """Raised when a resolved path does not contain a module manifest."""

    def __init__(self, module_path, reason: str = ""):
        self.module_path = module_path
        msg = f"Expected '{module_path}' to have a go.mod file, this is not a go module"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


# ============================================================================
# Execution Exceptions
# ============================================================================


class FileSystemError(GobindKitError):
    """Raised when a copy, move or remove operation fails."""

    pass


class ProcessError(GobindKitError):
    """Raised when an external command cannot be spawned or exits nonzero."""

    def __init__(self, message: str, command=None, returncode=None, output=None):
        self.command = list(command or [])
        self.returncode = returncode
        self.output = list(output or [])
        super().__init__(message)


# ============================================================================
# Configuration / Pipeline
# ============================================================================


class ConfigError(GobindKitError):
    """Configuration parsing or validation error."""

    pass


class PipelineError(GobindKitError):
    """Raised when a pipeline stage fails; names the stage that aborted the run."""

    def __init__(self, stage, cause: Exception):
        self.stage = stage
        self.cause = cause
        name = getattr(stage, "value", stage)
        super().__init__(f"Stage '{name}' failed: {cause}")
