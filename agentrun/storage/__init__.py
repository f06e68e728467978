from .base import InMemoryRunStore, RunStore

__all__ = ["RunStore", "InMemoryRunStore"]
