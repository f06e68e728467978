"""
FastAPI application for the agentrun server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agentrun.agent import AgentRegistry, get_registry
from agentrun.api.schemas import ErrorResponse
from agentrun.config import settings
from agentrun.exceptions import (
    AgentRunError,
    InvalidRunStateError,
    NotFoundError,
)
from agentrun.runtime import RunController
from agentrun.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS: dict[type[AgentRunError], int] = {
    NotFoundError: 404,
    InvalidRunStateError: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    controller: RunController = app.state.controller
    logger.info("agentrun_api_starting", agents=len(controller.registry))

    yield

    await controller.shutdown()
    logger.info("agentrun_api_shutdown")


async def handle_run_error(request: Request, exc: AgentRunError) -> JSONResponse:
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500
    )
    if status_code == 500:
        logger.error("request_failed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse.model_validate(
            {"error": exc.to_error().model_dump(mode="json")}
        ).model_dump(),
    )


def create_app(
    controller: RunController | None = None,
    registry: AgentRegistry | None = None,
) -> FastAPI:
    """
    Create FastAPI application serving agent runs.

    Args:
        controller: RunController to serve (built from settings if omitted)
        registry: Agent registry for a new controller (global registry if omitted)

    Returns:
        Configured FastAPI application
    """
    from .router import create_router

    if controller is None:
        registry = registry or get_registry()
        if settings.builtin_agents:
            registry.register_builtins()
        controller = RunController(
            registry,
            await_timeout=settings.await_timeout,
            event_queue_size=settings.event_queue_size,
        )

    from agentrun import __version__

    app = FastAPI(
        title="agentrun",
        description="Agent runs that pause for external input and resume.",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AgentRunError, handle_run_error)

    app.include_router(create_router())

    return app
