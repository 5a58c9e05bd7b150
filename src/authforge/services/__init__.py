"""External integrations for authforge.

This package provides the I/O edges of the bootstrapper:
- runner: External command execution
- prober: Tool detection and version checks
- filesystem: Generated file writes with overwrite policies
"""

from .filesystem import backup_path, ensure_directory, read_file, write_file
from .prober import (
    build_requirements,
    check_requirement,
    ensure_requirements,
    parse_version,
    probe,
    requirements_met,
    version_at_least,
)
from .runner import CommandResult, run_command

__all__ = [
    "CommandResult",
    "backup_path",
    "build_requirements",
    "check_requirement",
    "ensure_directory",
    "ensure_requirements",
    "parse_version",
    "probe",
    "read_file",
    "requirements_met",
    "run_command",
    "version_at_least",
    "write_file",
]
