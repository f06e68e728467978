"""
Tests for the run status state machine.
"""

import pytest

from agentrun.domain import AwaitRequest, Message, Run, RunStatus
from agentrun.exceptions import InvalidRunStateError
from agentrun.runtime.lifecycle import TRANSITIONS, can_transition, transition


@pytest.fixture
def run():
    return Run(agent_name="echo")


@pytest.fixture
def await_request():
    return AwaitRequest(message=Message.text("Proceed?", role="agent"))


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(TRANSITIONS) == set(RunStatus)

    @pytest.mark.parametrize(
        "status", [RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED]
    )
    def test_terminal_statuses_are_final(self, status):
        assert status.is_terminal
        assert all(not can_transition(status, target) for target in RunStatus)

    def test_awaiting_only_resumes_or_cancels(self):
        assert TRANSITIONS[RunStatus.AWAITING] == {
            RunStatus.IN_PROGRESS,
            RunStatus.CANCELLED,
        }

    def test_created_cannot_complete_directly(self):
        assert not can_transition(RunStatus.CREATED, RunStatus.COMPLETED)
        assert not can_transition(RunStatus.CREATED, RunStatus.AWAITING)


class TestTransition:
    def test_await_sets_request(self, run, await_request):
        transition(run, RunStatus.IN_PROGRESS)
        transition(run, RunStatus.AWAITING, await_request=await_request)

        assert run.status == RunStatus.AWAITING
        assert run.await_request == await_request
        assert run.finished_at is None

    def test_resume_clears_request(self, run, await_request):
        transition(run, RunStatus.IN_PROGRESS)
        transition(run, RunStatus.AWAITING, await_request=await_request)
        transition(run, RunStatus.IN_PROGRESS)

        assert run.await_request is None

    def test_await_requires_request(self, run):
        transition(run, RunStatus.IN_PROGRESS)

        with pytest.raises(InvalidRunStateError):
            transition(run, RunStatus.AWAITING)
        assert run.status == RunStatus.IN_PROGRESS

    def test_terminal_sets_finished_at(self, run):
        transition(run, RunStatus.IN_PROGRESS)
        transition(run, RunStatus.COMPLETED)

        assert run.finished_at is not None

    def test_invalid_transition_leaves_run_unchanged(self, run):
        transition(run, RunStatus.CANCELLED)
        finished_at = run.finished_at

        with pytest.raises(InvalidRunStateError):
            transition(run, RunStatus.IN_PROGRESS)

        assert run.status == RunStatus.CANCELLED
        assert run.finished_at == finished_at
