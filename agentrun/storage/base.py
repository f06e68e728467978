"""
Run store interface and in-memory implementation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from agentrun.domain import Run, RunStatus


class RunStore(ABC):
    """
    Run store interface.
    Responsible for Run snapshot persistence and queries.
    """

    @abstractmethod
    async def save_run(self, run: Run) -> None:
        """Save or replace Run snapshot"""
        pass

    @abstractmethod
    async def get_run(self, run_id: str) -> Optional[Run]:
        """Get Run"""
        pass

    @abstractmethod
    async def list_runs(
        self,
        agent_name: Optional[str] = None,
        status: Optional[RunStatus] = None,
        session_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Run]:
        """List Runs, newest first"""
        pass


class InMemoryRunStore(RunStore):
    """
    In-memory implementation (for testing and development)
    """

    def __init__(self):
        self.runs: dict[str, Run] = {}

    async def save_run(self, run: Run) -> None:
        self.runs[run.id] = run.model_copy(deep=True)

    async def get_run(self, run_id: str) -> Optional[Run]:
        run = self.runs.get(run_id)
        return run.model_copy(deep=True) if run else None

    async def list_runs(
        self,
        agent_name: Optional[str] = None,
        status: Optional[RunStatus] = None,
        session_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Run]:
        runs = list(self.runs.values())

        if agent_name:
            runs = [r for r in runs if r.agent_name == agent_name]

        if status:
            runs = [r for r in runs if r.status == status]

        if session_id:
            runs = [r for r in runs if r.session_id == session_id]

        runs.sort(key=lambda r: r.created_at, reverse=True)

        return [r.model_copy(deep=True) for r in runs[offset : offset + limit]]


__all__ = ["RunStore", "InMemoryRunStore"]
