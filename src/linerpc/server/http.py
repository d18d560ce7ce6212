"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

HTTP transport for the same dispatcher, built on FastAPI.

Endpoints:
    ``POST /mcp``: JSON-RPC 2.0 endpoint (single or batch)
    ``GET /health``: health check
"""

from typing import Any

from ..jsonrpc import INVALID_REQUEST, ParseError, decode_line, jsonrpc_error
from .dispatcher import Dispatcher
from .protocol import ServerConfig


def _create_router(dispatcher: Dispatcher, config: ServerConfig):
    """Build an APIRouter containing the JSON-RPC and health routes."""
    try:
        from fastapi import APIRouter, Request
        from fastapi.responses import JSONResponse, Response
    except ImportError:
        raise ImportError(
            "FastAPI is required for the HTTP transport. "
            "Install it with: pip install 'linerpc[http]'"
        )

    router = APIRouter()

    if config.enable_health:

        @router.get(config.health_path)
        async def health():
            return {
                "status": "ok",
                "server": config.name,
                "version": config.version,
                "methods": dispatcher.registry.names(),
            }

    @router.post(config.mcp_path)
    async def jsonrpc_endpoint(request: Request):
        try:
            body = decode_line((await request.body()).decode("utf-8", errors="replace"))
        except ParseError as exc:
            return JSONResponse(jsonrpc_error(None, exc.code, exc.message, exc.data))

        if isinstance(body, list):
            if not config.allow_batch_requests:
                return JSONResponse(
                    jsonrpc_error(None, INVALID_REQUEST, "Batch requests disabled")
                )
            if not body:
                return JSONResponse(jsonrpc_error(None, INVALID_REQUEST, "Empty batch"))
            responses = []
            for item in body:
                resp = await dispatcher.handle_message(item)
                if resp is not None:
                    responses.append(resp)
            if not responses:
                return Response(status_code=204)
            return JSONResponse(responses)

        result = await dispatcher.handle_message(body)
        if result is None:
            return Response(status_code=204)
        return JSONResponse(result)

    return router


def create_http_app(dispatcher: Dispatcher, config: ServerConfig | None = None):
    """Build the FastAPI application exposing ``dispatcher``."""
    try:
        from fastapi import FastAPI
    except ImportError:
        raise ImportError(
            "FastAPI is required for the HTTP transport. "
            "Install it with: pip install 'linerpc[http]'"
        )

    config = config or ServerConfig()
    app = FastAPI(
        title=config.name,
        version=config.version,
        description="linerpc JSON-RPC server",
    )
    app.include_router(_create_router(dispatcher, config))
    return app


def run_http(dispatcher: Dispatcher, config: ServerConfig | None = None, **kwargs: Any) -> None:
    """
    Start the HTTP transport using uvicorn.

    Args:
        **kwargs: Additional arguments passed to ``uvicorn.run()``.
    """
    try:
        import uvicorn
    except ImportError:
        raise ImportError(
            "uvicorn is required to run the HTTP transport. "
            "Install it with: pip install 'linerpc[http]'"
        )

    config = config or ServerConfig()
    uvicorn.run(
        create_http_app(dispatcher, config),
        host=kwargs.pop("host", config.host),
        port=kwargs.pop("port", config.port),
        **kwargs,
    )
