"""
Run Lifecycle - state machine for Run status transitions.

    created -> in_progress -> {awaiting <-> in_progress} -> {completed | failed}
    any non-terminal -> cancelled

Terminal statuses accept no further transitions.
"""

from datetime import datetime

from agentrun.domain import AwaitRequest, Run, RunStatus
from agentrun.exceptions import InvalidRunStateError

TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.CREATED: frozenset({RunStatus.IN_PROGRESS, RunStatus.CANCELLED}),
    RunStatus.IN_PROGRESS: frozenset(
        {
            RunStatus.AWAITING,
            RunStatus.COMPLETED,
            RunStatus.FAILED,
            RunStatus.CANCELLED,
        }
    ),
    RunStatus.AWAITING: frozenset({RunStatus.IN_PROGRESS, RunStatus.CANCELLED}),
    RunStatus.COMPLETED: frozenset(),
    RunStatus.FAILED: frozenset(),
    RunStatus.CANCELLED: frozenset(),
}


def can_transition(current: RunStatus, target: RunStatus) -> bool:
    return target in TRANSITIONS[current]


def transition(
    run: Run,
    target: RunStatus,
    *,
    await_request: AwaitRequest | None = None,
) -> Run:
    """
    Move a run to the target status in place.

    Args:
        run: Run to mutate
        target: Next status
        await_request: Required when entering AWAITING

    Raises:
        InvalidRunStateError: Transition not allowed; run is left unchanged
    """
    if not can_transition(run.status, target):
        raise InvalidRunStateError(
            f"Run '{run.id}' cannot move from {run.status.value} to {target.value}"
        )
    if target == RunStatus.AWAITING and await_request is None:
        raise InvalidRunStateError(
            f"Run '{run.id}' cannot await without an await request"
        )

    run.status = target
    if target == RunStatus.AWAITING:
        run.await_request = await_request
    else:
        run.await_request = None
    if target.is_terminal:
        run.finished_at = datetime.now()
    return run


__all__ = ["TRANSITIONS", "can_transition", "transition"]
