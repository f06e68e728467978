"""
agentrun HTTP API.

Usage:
    # Standalone server
    from agentrun.api import start_server
    start_server(host="0.0.0.0", port=8000)

    # Integrate with an existing FastAPI app
    from agentrun.api import create_router
    app.include_router(create_router(prefix="/acp"))
"""

from .app import create_app
from .router import create_router


def start_server(
    host: str = "0.0.0.0",
    port: int = 8000,
    reload: bool = False,
    **kwargs,
):
    """Start standalone agentrun API server.

    Args:
        host: Bind host
        port: Bind port
        reload: Enable auto-reload for development
        **kwargs: Additional uvicorn arguments
    """
    import uvicorn

    uvicorn.run(
        "agentrun.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        **kwargs,
    )


__all__ = ["create_app", "create_router", "start_server"]
