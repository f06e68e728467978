"""
Tests for agent definitions and the AgentRegistry.
"""

import pytest

from agentrun.agent import Agent, AgentRegistry, agent
from agentrun.exceptions import NotFoundError


@agent(name="greeter", description="Says hello", metadata={"version": "1"})
async def greeter(input, context):
    yield "hello"


class TestAgentDecorator:
    def test_manifest_from_arguments(self):
        assert isinstance(greeter, Agent)
        assert greeter.name == "greeter"
        assert greeter.manifest.description == "Says hello"
        assert greeter.manifest.metadata == {"version": "1"}

    def test_manifest_defaults_to_function(self):
        @agent()
        async def documented(input, context):
            """Does documented things."""
            yield "ok"

        assert documented.name == "documented"
        assert documented.manifest.description == "Does documented things."

    def test_sync_function_is_rejected(self):
        def not_async(input, context):
            return "nope"

        with pytest.raises(TypeError):
            Agent(not_async)


class TestAgentRegistry:
    def test_register_and_get(self):
        registry = AgentRegistry()
        registry.register(greeter)

        assert "greeter" in registry
        assert len(registry) == 1
        assert registry.get("greeter") is greeter
        assert [m.name for m in registry.list()] == ["greeter"]

    def test_duplicate_name_is_rejected(self):
        registry = AgentRegistry()
        registry.register(greeter)

        with pytest.raises(ValueError):
            registry.register(greeter)
        registry.register(greeter, replace=True)
        assert len(registry) == 1

    def test_unknown_agent(self):
        with pytest.raises(NotFoundError):
            AgentRegistry().get("missing")

    def test_unregister(self):
        registry = AgentRegistry()
        registry.register(greeter)
        registry.unregister("greeter")
        registry.unregister("greeter")

        assert "greeter" not in registry

    def test_register_builtins(self):
        registry = AgentRegistry()
        registry.register_builtins()

        assert set(AgentRegistry.BUILTIN_AGENTS) <= {m.name for m in registry.list()}
        assert registry.get("password_generator").manifest.description
