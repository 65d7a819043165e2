"""HTTP transport adapters.

* ``endpoint``            — method check, pre-flight and CORS for any handler
* ``tool_call_endpoint``  — ``{operation, arguments}`` → registry dispatch
* ``discovery_endpoint``  — ``{type, params}`` → list/call/read sub-protocols

Dispatcher exceptions are mapped to status codes here and nowhere else.
Error bodies never carry stack traces; those go to the server log.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import Any, Awaitable, Callable, Iterable

from protocol.toolcall import (
    CALL_TOOL,
    INTERNAL_ERROR,
    LIST_RESOURCES,
    LIST_TOOLS,
    READ_RESOURCE,
    DiscoveryRequest,
    ToolCallRequest,
    ToolError,
)
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from gateway.registry import HandlerError, MethodNotFoundError, Registry, ResourceNotFoundError
from gateway.schema import InvalidParamsError

log = logging.getLogger(__name__)

# Every verb is routed to the endpoint so the 405 body stays JSON.
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

EndpointFn = Callable[[Request], Awaitable[Response]]


class BadRequest(Exception):
    """Raised when a body cannot be parsed into the expected shape."""


# ── Helpers ──────────────────────────────────────────────────────────


def cors_headers(methods: Iterable[str]) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ", ".join(methods),
        "Access-Control-Allow-Headers": "Content-Type",
    }


def error_response(status: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status)


async def read_json(request: Request) -> Any:
    """Parse the body as JSON; an empty body reads as ``{}``."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise BadRequest("Invalid JSON body") from exc


def endpoint(
    methods: Iterable[str] = ("POST",),
    *,
    cors: bool = False,
    preflight: bool = False,
) -> Callable[[EndpointFn], EndpointFn]:
    """Wrap a handler with the method policy of one HTTP endpoint.

    With ``cors`` every response, 405s included, carries the permissive
    CORS headers.  With ``preflight`` an OPTIONS request is answered with
    200 and an empty body.  Bodies that fail to parse give 400.
    """
    allowed = list(methods)
    if preflight and "OPTIONS" not in allowed:
        allowed.append("OPTIONS")
    headers = cors_headers(allowed) if cors else {}

    def decorator(fn: EndpointFn) -> EndpointFn:
        @functools.wraps(fn)
        async def wrapper(request: Request) -> Response:
            if preflight and request.method == "OPTIONS":
                resp: Response = Response(status_code=200)
            elif request.method not in allowed or request.method == "OPTIONS":
                resp = error_response(405, "Method not allowed")
            else:
                try:
                    resp = await fn(request)
                except BadRequest as exc:
                    resp = error_response(400, str(exc))
            resp.headers.update(headers)
            return resp

        return wrapper

    return decorator


def _failure(exc: Exception) -> JSONResponse:
    """Map a dispatch exception to its HTTP response."""
    if isinstance(exc, InvalidParamsError):
        err = ToolError(exc.code, str(exc), details=exc.problems)
        return JSONResponse(err.to_dict(), status_code=400)
    if isinstance(exc, (MethodNotFoundError, ResourceNotFoundError, HandlerError)):
        return JSONResponse(ToolError(exc.code, str(exc)).to_dict(), status_code=500)
    log.exception("unexpected dispatch failure")
    return JSONResponse(ToolError(INTERNAL_ERROR, "Internal error").to_dict(), status_code=500)


# ── Tool-call style ──────────────────────────────────────────────────


def tool_call_endpoint(registry: Registry) -> EndpointFn:
    """Build the ``{operation, arguments}`` endpoint for *registry*."""

    @endpoint(("POST",))
    async def handle(request: Request) -> Response:
        try:
            call = ToolCallRequest.from_dict(await read_json(request))
        except ValueError as exc:
            raise BadRequest(str(exc)) from exc

        log.info("%s ← %s", registry.name, call.operation)
        try:
            result = await registry.dispatch(call.operation, call.arguments)
        except Exception as exc:
            return _failure(exc)
        return JSONResponse(result.to_dict())

    return handle


# ── Discovery style ──────────────────────────────────────────────────


async def _discover(registry: Registry, req: DiscoveryRequest) -> dict[str, Any]:
    if req.type == LIST_TOOLS:
        return {"tools": registry.list()}
    if req.type == LIST_RESOURCES:
        return {"resources": registry.list_resources()}
    if req.type == CALL_TOOL:
        try:
            call = ToolCallRequest.from_params(req.params)
        except ValueError as exc:
            raise BadRequest(str(exc)) from exc
        log.info("%s ← %s", registry.name, call.operation)
        return (await registry.dispatch(call.operation, call.arguments)).to_dict()
    if req.type == READ_RESOURCE:
        uri = req.params.get("uri")
        if not isinstance(uri, str) or not uri:
            raise BadRequest("missing or invalid 'uri' field")
        return await registry.read(uri)
    raise AssertionError(f"unhandled discovery type {req.type!r}")


def discovery_endpoint(registry: Registry) -> EndpointFn:
    """Build the ``{type, params}`` endpoint for *registry*."""

    @endpoint(("POST",))
    async def handle(request: Request) -> Response:
        try:
            req = DiscoveryRequest.from_dict(await read_json(request))
        except ValueError as exc:
            raise BadRequest(str(exc)) from exc

        if not req.is_known:
            return error_response(400, "Unknown API type")

        try:
            body = await _discover(registry, req)
        except BadRequest:
            raise
        except Exception as exc:
            return _failure(exc)
        return JSONResponse(body)

    return handle
