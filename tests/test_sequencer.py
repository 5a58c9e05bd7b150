"""Tests for the scaffolding sequencer state machine."""

from pathlib import Path

import pytest

from authforge.core.sequencer import FailurePolicy, Sequencer, Step, StepContext
from authforge.errors import CommandFailed, WriteFailed
from authforge.models import RunStatus, StepState


def _ok(message: str = "done"):
    def action(ctx: StepContext) -> str:
        return message

    return action


def _fail(error: Exception):
    def action(ctx: StepContext) -> None:
        raise error

    return action


class Recorder:
    """Action that records the order in which steps ran."""

    def __init__(self) -> None:
        self.order: list[str] = []

    def __call__(self, name: str):
        def action(ctx: StepContext) -> None:
            self.order.append(name)

        return action


class TestSequencerValidation:
    """Tests for step declaration checks."""

    def test_rejects_duplicate_ids(self) -> None:
        with pytest.raises(ValueError, match="unique"):
            Sequencer([Step("a", "", _ok()), Step("a", "", _ok())])

    def test_rejects_forward_dependency(self) -> None:
        with pytest.raises(ValueError, match="not declared before"):
            Sequencer([Step("a", "", _ok(), depends_on=("b",)), Step("b", "", _ok())])


class TestSequencerRun:
    """Tests for Sequencer.run invariants."""

    def test_runs_in_declaration_order(self, make_context) -> None:
        record = Recorder()
        steps = [Step(name, "", record(name)) for name in ("one", "two", "three")]
        result = Sequencer(steps).run(make_context())
        assert record.order == ["one", "two", "three"]
        assert result.status == RunStatus.COMPLETED
        assert result.exit_code == 0

    def test_run_log_has_one_entry_per_step(self, make_context) -> None:
        """Invariant: Every reached step is logged exactly once, in order."""
        steps = [
            Step("a", "", _ok("first")),
            Step("b", "", _ok(), predicate=lambda ctx: False, skip_reason="nope"),
            Step("c", "", _ok("third")),
        ]
        ctx = make_context()
        result = Sequencer(steps).run(ctx)
        assert len(result.run_log) == 3
        assert [e.step_id for e in ctx.run_log.entries] == ["a", "b", "c"]
        assert [e.outcome for e in ctx.run_log.entries] == [
            StepState.SUCCEEDED,
            StepState.SKIPPED,
            StepState.SUCCEEDED,
        ]
        assert ctx.run_log.entries[0].message == "first"
        assert ctx.run_log.entries[1].message == "nope"

    def test_fatal_failure_aborts_and_stops(self, make_context) -> None:
        record = Recorder()
        steps = [
            Step("a", "", record("a")),
            Step("b", "", _fail(CommandFailed("flutter", 1, "boom"))),
            Step("c", "", record("c")),
        ]
        result = Sequencer(steps).run(make_context())
        assert result.status == RunStatus.ABORTED
        assert result.failed_step == "b"
        assert result.exit_code == 1
        assert record.order == ["a"]
        assert result.states == {
            "a": StepState.SUCCEEDED,
            "b": StepState.FAILED,
            "c": StepState.PENDING,
        }
        assert len(result.run_log) == 2
        assert "boom" in result.run_log.entries[-1].message

    def test_skippable_failure_continues(self, make_context) -> None:
        record = Recorder()
        steps = [
            Step("push", "", _fail(CommandFailed("gh", 1)), policy=FailurePolicy.SKIPPABLE),
            Step("after", "", record("after")),
        ]
        result = Sequencer(steps).run(make_context())
        assert result.status == RunStatus.COMPLETED
        assert result.states["push"] == StepState.FAILED
        assert record.order == ["after"]

    def test_false_predicate_skips(self, make_context) -> None:
        record = Recorder()
        steps = [Step("opt", "", record("opt"), predicate=lambda ctx: False)]
        result = Sequencer(steps).run(make_context())
        assert record.order == []
        assert result.states["opt"] == StepState.SKIPPED
        assert result.completed

    def test_predicate_reads_context(self, make_context) -> None:
        record = Recorder()
        steps = [
            Step("ci", "", record("ci"), predicate=lambda ctx: ctx.project.ci_enabled),
        ]
        Sequencer(steps).run(make_context(ci_enabled=False))
        assert record.order == []

    def test_dependency_on_skipped_step_skips(self, make_context) -> None:
        """Invariant: A step runs only after its predecessors succeeded."""
        record = Recorder()
        steps = [
            Step("link", "", record("link"), predicate=lambda ctx: False),
            Step("configure", "", record("configure"), depends_on=("link",)),
            Step("independent", "", record("independent")),
        ]
        result = Sequencer(steps).run(make_context())
        assert record.order == ["independent"]
        assert result.states["configure"] == StepState.SKIPPED
        assert "link" in result.run_log.entries[1].message
        assert result.completed

    def test_dependency_on_failed_skippable_step_skips(self, make_context) -> None:
        record = Recorder()
        steps = [
            Step("link", "", _fail(CommandFailed("firebase", 2)), policy=FailurePolicy.SKIPPABLE),
            Step("configure", "", record("configure"), depends_on=("link",)),
        ]
        result = Sequencer(steps).run(make_context())
        assert record.order == []
        assert result.states["configure"] == StepState.SKIPPED

    def test_completed_requires_fatal_steps_succeeded_or_skipped(self, make_context) -> None:
        steps = [
            Step("a", "", _ok()),
            Step("b", "", _ok(), predicate=lambda ctx: False),
            Step(
                "c",
                "",
                _fail(WriteFailed(Path("x"), "disk full")),
                policy=FailurePolicy.SKIPPABLE,
            ),
        ]
        result = Sequencer(steps).run(make_context())
        assert result.completed
        for step in steps:
            if step.policy == FailurePolicy.FATAL:
                assert result.states[step.id] in (StepState.SUCCEEDED, StepState.SKIPPED)

    def test_unexpected_exceptions_propagate(self, make_context) -> None:
        """Programming errors are not treated as step failures."""
        steps = [Step("bug", "", _fail(KeyError("oops")))]
        with pytest.raises(KeyError):
            Sequencer(steps).run(make_context())

    def test_later_steps_see_earlier_outcomes(self, make_context) -> None:
        seen: list[StepState | None] = []

        def check(ctx: StepContext) -> None:
            seen.append(ctx.run_log.outcome_of("first"))

        steps = [Step("first", "", _ok()), Step("second", "", check)]
        Sequencer(steps).run(make_context())
        assert seen == [StepState.SUCCEEDED]
