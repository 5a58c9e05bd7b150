"""Run log models.

The run log is the append-only audit trail of a scaffolding run: one entry
per step that was reached, plus one record per file written.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class StepState(str, Enum):
    """Lifecycle of a single step."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class RunStatus(str, Enum):
    """Overall run state."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"


class LogEntry(BaseModel):
    """Outcome of one step."""

    step_id: str = Field(description="Step identifier")
    outcome: StepState = Field(description="Terminal state of the step")
    message: str = Field(default="", description="Human-readable detail")
    timestamp: datetime = Field(default_factory=datetime.now, description="When recorded")


class FileRecord(BaseModel):
    """A file written during the run."""

    path: str = Field(description="Absolute path of the written file")
    size: int = Field(description="Bytes written")


class RunLog(BaseModel):
    """Append-only ordered record of step outcomes and written files.

    ``len(run_log)`` counts step entries only; file records are reported
    separately.
    """

    entries: list[LogEntry] = Field(default_factory=list)
    files: list[FileRecord] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def record(self, step_id: str, outcome: StepState, message: str = "") -> LogEntry:
        """Append a step outcome."""
        entry = LogEntry(step_id=step_id, outcome=outcome, message=message)
        self.entries.append(entry)
        return entry

    def record_file(self, path: str, size: int) -> FileRecord:
        """Append a written-file record."""
        record = FileRecord(path=path, size=size)
        self.files.append(record)
        return record

    def outcome_of(self, step_id: str) -> StepState | None:
        """Return the recorded outcome of a step, or None if it never ran."""
        for entry in reversed(self.entries):
            if entry.step_id == step_id:
                return entry.outcome
        return None
