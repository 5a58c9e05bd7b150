"""Error taxonomy for authforge.

Lower layers raise these to report structured failure facts. Only the
sequencer decides whether a failure aborts the run or is skipped.
"""

from pathlib import Path


class BootstrapError(Exception):
    """Base exception for scaffolding failures."""


class UsageError(BootstrapError):
    """Malformed invocation (for example an invalid project name)."""


class ToolMissing(BootstrapError):
    """A required external tool is not installed."""

    def __init__(self, name: str, hint: str = "", reason: str = "not found in PATH") -> None:
        self.name = name
        self.hint = hint
        message = f"{name}: {reason}"
        if hint:
            message += f". {hint}"
        super().__init__(message)


class ToolVersionTooLow(BootstrapError):
    """A required external tool is older than its configured minimum."""

    def __init__(self, name: str, found: str, minimum: str, hint: str = "") -> None:
        self.name = name
        self.found = found
        self.minimum = minimum
        self.hint = hint
        message = f"{name} >= {minimum} required, found {found}"
        if hint:
            message += f". {hint}"
        super().__init__(message)


class UnresolvedPlaceholder(BootstrapError):
    """A template references variables that were not supplied."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Unresolved placeholder(s): {', '.join(names)}")


class BackupCollision(BootstrapError):
    """A backup file already exists where a new backup would be written."""

    def __init__(self, path: Path, backup: Path) -> None:
        self.path = path
        self.backup = backup
        super().__init__(f"Cannot back up {path}: {backup} already exists")


class WriteFailed(BootstrapError):
    """Writing a generated file failed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class PatchFailed(BootstrapError):
    """A structural edit could not find its anchor in the target file."""

    def __init__(self, path: Path, anchor: str) -> None:
        self.path = path
        self.anchor = anchor
        super().__init__(f"Could not patch {path}: '{anchor}' not found")


class CommandFailed(BootstrapError):
    """An external command exited with a non-zero status."""

    def __init__(self, executable: str, exit_code: int, stderr_excerpt: str = "") -> None:
        self.executable = executable
        self.exit_code = exit_code
        self.stderr_excerpt = stderr_excerpt
        message = f"{executable} exited with code {exit_code}"
        if stderr_excerpt:
            message += f": {stderr_excerpt}"
        super().__init__(message)


class TemplateError(BootstrapError):
    """A packaged template is missing, unreadable or malformed."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Template {name}: {reason}")


class ReadFailed(BootstrapError):
    """Reading a generated file back failed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read {path}: {reason}")
