"""Scaffolding sequencer.

Runs a fixed, ordered list of steps against one project context. Each step
moves through ``pending -> running -> succeeded | skipped | failed``; the run
itself ends ``completed`` or ``aborted``. The sequencer is the only place
that decides whether a failure is fatal.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from ..config import BootstrapConfig
from ..errors import BootstrapError
from ..models import ProjectContext, RunLog, RunStatus, StepState, ToolRequirement, ToolStatus

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    """What a failing step does to the run."""

    FATAL = "fatal"
    SKIPPABLE = "skippable"


@dataclass(frozen=True)
class StepContext:
    """Read-only inputs shared by every step, plus the run log they append to."""

    project: ProjectContext
    config: BootstrapConfig
    requirements: list[ToolRequirement]
    tools: dict[str, ToolStatus]
    run_log: RunLog

    def has_tool(self, name: str) -> bool:
        """Return True if the probe found the named tool."""
        status = self.tools.get(name)
        return status is not None and status.present

    def tool_version(self, name: str) -> str | None:
        """Return the probed version of a tool, if known."""
        status = self.tools.get(name)
        return status.version if status else None


StepAction = Callable[[StepContext], str | None]
StepPredicate = Callable[[StepContext], bool]


@dataclass(frozen=True)
class Step:
    """One unit of scaffolding work.

    Attributes:
        id: Unique identifier shown in the run log.
        description: Progress message logged when the step starts.
        action: Does the work; may return a summary message.
        policy: Whether a failure aborts the run.
        depends_on: Steps that must have succeeded first.
        predicate: Eligibility check; the step is skipped when it returns False.
        skip_reason: Log message used when the predicate is False.
    """

    id: str
    description: str
    action: StepAction
    policy: FailurePolicy = FailurePolicy.FATAL
    depends_on: tuple[str, ...] = ()
    predicate: StepPredicate | None = None
    skip_reason: str = "not applicable"


@dataclass
class SequenceResult:
    """Outcome of a sequencer run."""

    status: RunStatus
    run_log: RunLog
    states: dict[str, StepState] = field(default_factory=dict)
    failed_step: str | None = None

    @property
    def completed(self) -> bool:
        return self.status == RunStatus.COMPLETED

    @property
    def exit_code(self) -> int:
        return 0 if self.completed else 1


def _unmet_dependency(step: Step, states: dict[str, StepState]) -> str | None:
    for dependency in step.depends_on:
        if states.get(dependency) != StepState.SUCCEEDED:
            return dependency
    return None


class Sequencer:
    """Executes steps strictly in declaration order."""

    def __init__(self, steps: list[Step]) -> None:
        ids = [step.id for step in steps]
        if len(ids) != len(set(ids)):
            raise ValueError("Step identifiers must be unique")
        for index, step in enumerate(steps):
            earlier = set(ids[:index])
            for dependency in step.depends_on:
                if dependency not in earlier:
                    raise ValueError(
                        f"Step '{step.id}' depends on '{dependency}', "
                        "which is not declared before it"
                    )
        self.steps = steps

    def run(self, context: StepContext) -> SequenceResult:
        """Run every step and return the final result.

        Args:
            context: Shared step inputs; its run log receives one entry per step reached

        Returns:
            SequenceResult with the run status and per-step states
        """
        run_log = context.run_log
        states = {step.id: StepState.PENDING for step in self.steps}
        result = SequenceResult(status=RunStatus.IN_PROGRESS, run_log=run_log, states=states)

        for step in self.steps:
            unmet = _unmet_dependency(step, states)
            if unmet is not None:
                message = f"requires '{unmet}', which did not succeed"
                self._skip(step, states, run_log, message)
                continue

            if step.predicate is not None and not step.predicate(context):
                self._skip(step, states, run_log, step.skip_reason)
                continue

            states[step.id] = StepState.RUNNING
            logger.info(step.description)
            try:
                message = step.action(context) or ""
            except BootstrapError as e:
                states[step.id] = StepState.FAILED
                run_log.record(step.id, StepState.FAILED, str(e))
                if step.policy == FailurePolicy.FATAL:
                    logger.error(f"{step.id} failed: {e}")
                    result.status = RunStatus.ABORTED
                    result.failed_step = step.id
                    return result
                logger.warning(f"{step.id} failed, continuing: {e}")
                continue

            states[step.id] = StepState.SUCCEEDED
            run_log.record(step.id, StepState.SUCCEEDED, message)

        result.status = RunStatus.COMPLETED
        return result

    @staticmethod
    def _skip(
        step: Step,
        states: dict[str, StepState],
        run_log: RunLog,
        message: str,
    ) -> None:
        logger.info(f"Skipping {step.id}: {message}")
        states[step.id] = StepState.SKIPPED
        run_log.record(step.id, StepState.SKIPPED, message)
