"""agentrun exceptions."""

from agentrun.domain import Error, ErrorCode


class AgentRunError(Exception):
    """Base exception for run errors."""

    code: ErrorCode = ErrorCode.SERVER_ERROR

    def to_error(self) -> Error:
        return Error(code=self.code, message=str(self))


class NotFoundError(AgentRunError):
    """Unknown run identifier or agent name."""

    code = ErrorCode.NOT_FOUND


class InvalidRunStateError(AgentRunError):
    """Operation not valid for the run's current status."""

    code = ErrorCode.INVALID_INPUT


class ExecutionFailure(AgentRunError):
    """Agent logic raised an unhandled error while being driven."""

    pass


class RunCancelledError(AgentRunError):
    """Run was cancelled while its caller was waiting on it."""

    pass
