"""Output formatting for the authforge CLI."""

import json
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.sequencer import SequenceResult
from .models import RunLog, StepState

OUTCOME_STYLES = {
    StepState.SUCCEEDED: "green",
    StepState.SKIPPED: "yellow",
    StepState.FAILED: "red",
}


@dataclass
class OutputContext:
    """Context for output formatting."""

    console: Console
    json_mode: bool = False

    def print(self, message: str, style: str | None = None) -> None:
        """Print message respecting output mode."""
        if not self.json_mode:
            self.console.print(message, style=style)

    def print_json(self, data: dict[str, Any]) -> None:
        """Print JSON data."""
        if self.json_mode:
            print(json.dumps(data, indent=2, default=str))

    def error(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Print error in appropriate format."""
        if self.json_mode:
            self.print_json({"error": message, **(data or {})})
        else:
            self.console.print(f"[red]Error: {escape(message)}[/red]")

    def run_log_table(self, run_log: RunLog, failed_step: str | None = None) -> Table:
        """Build a table of step outcomes, highlighting the failing step."""
        table = Table(title="Run log", show_lines=False)
        table.add_column("Step")
        table.add_column("Outcome")
        table.add_column("Message", overflow="fold")
        for entry in run_log.entries:
            style = OUTCOME_STYLES.get(entry.outcome)
            row_style = "bold red" if entry.step_id == failed_step else None
            table.add_row(
                entry.step_id,
                f"[{style}]{entry.outcome.value}[/{style}]" if style else entry.outcome.value,
                escape(entry.message),
                style=row_style,
            )
        return table

    def summary(self, result: SequenceResult) -> None:
        """Report a finished run: the run log plus written files."""
        if self.json_mode:
            data = result.run_log.model_dump(mode="json")
            data["status"] = result.status.value
            data["failed_step"] = result.failed_step
            self.print_json(data)
            return

        self.console.print(self.run_log_table(result.run_log, result.failed_step))
        files = result.run_log.files
        if files:
            total = sum(record.size for record in files)
            self.console.print(f"{len(files)} file(s) written ({total} bytes)")


# Global output context (set by cli.py main)
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context.

    Returns a default OutputContext if not yet initialized by CLI.
    """
    if _ctx is None:
        return OutputContext(Console())
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    """Set the global output context. Called by the CLI entry point."""
    global _ctx
    _ctx = ctx
