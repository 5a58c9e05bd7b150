"""Pydantic data models for authforge.

This package defines the data structures shared across the bootstrapper:
- Tool requirements and probe findings (ToolRequirement, ToolStatus)
- The immutable project context (ProjectContext)
- Generated-file descriptions (TemplateSpec)
- The run audit trail (RunLog, LogEntry, FileRecord)

Example:
    >>> from authforge.models import RunLog, StepState
    >>> log = RunLog()
    >>> _ = log.record("create-project", StepState.SUCCEEDED)
    >>> len(log)
    1
"""

from .context import ProjectContext, validate_project_name
from .run_log import FileRecord, LogEntry, RunLog, RunStatus, StepState
from .template import OverwritePolicy, TemplateSpec
from .tool import ToolRequirement, ToolStatus

__all__ = [
    "FileRecord",
    "LogEntry",
    "OverwritePolicy",
    "ProjectContext",
    "RunLog",
    "RunStatus",
    "StepState",
    "TemplateSpec",
    "ToolRequirement",
    "ToolStatus",
    "validate_project_name",
]
