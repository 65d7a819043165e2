"""Capability registry and dispatch.

Tools register themselves via the ``@registry.tool`` decorator and
read-only documents via ``@registry.resource``.  A registry is filled
at import time and frozen when the app is assembled; after that it is
only read.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Union

from protocol.toolcall import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    RESOURCE_NOT_FOUND,
    ResourceContents,
    ToolResult,
)

from gateway.schema import FieldSpec, object_schema, validate_arguments

log = logging.getLogger(__name__)

# Type alias for a tool handler: async (arguments) -> result
HandlerFn = Callable[[dict[str, Any]], Awaitable[Union[ToolResult, str]]]
# Resource reader: () -> JSON-serialisable data (sync or async)
ReaderFn = Callable[[], Any]


class MethodNotFoundError(Exception):
    """Raised when no capability is registered under the requested name."""

    def __init__(self, method: str) -> None:
        self.method = method
        self.code = METHOD_NOT_FOUND
        super().__init__(f"Unknown tool: {method}")


class ResourceNotFoundError(Exception):
    def __init__(self, uri: str) -> None:
        self.uri = uri
        self.code = RESOURCE_NOT_FOUND
        super().__init__(f"Unknown resource: {uri}")


class HandlerError(Exception):
    """A handler raised; the original exception is chained as ``__cause__``."""

    def __init__(self, method: str, message: str) -> None:
        self.method = method
        self.code = INTERNAL_ERROR
        super().__init__(message)


class DuplicateRegistrationError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Capability:
    name: str
    description: str
    fields: Mapping[str, FieldSpec]
    handler: HandlerFn

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": object_schema(self.fields),
        }


@dataclass(frozen=True, slots=True)
class Resource:
    uri: str
    name: str
    description: str
    reader: ReaderFn
    mime_type: str = "application/json"

    def describe(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }

    async def read(self) -> dict[str, Any]:
        data = self.reader()
        if inspect.isawaitable(data):
            data = await data
        text = json.dumps(data, indent=2, ensure_ascii=False)
        return {"contents": [ResourceContents(self.uri, text, self.mime_type).to_dict()]}


class Registry:
    """A name → capability mapping, plus the resources served beside it.

    Usage::

        registry = Registry("echo-server")

        @registry.tool("echo", "Repeat a message", msg=string(required=True))
        async def echo(args):
            return args["msg"]

        registry.freeze()
        result = await registry.dispatch("echo", {"msg": "hi"})
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._capabilities: dict[str, Capability] = {}
        self._resources: dict[str, Resource] = {}
        self._frozen = False

    # -- Registration --------------------------------------------------
    def _check_open(self) -> None:
        if self._frozen:
            raise RuntimeError(f"registry {self.name!r} is frozen")

    def register(
        self,
        name: str,
        description: str,
        fields: Mapping[str, FieldSpec],
        handler: HandlerFn,
    ) -> Capability:
        self._check_open()
        if name in self._capabilities:
            raise DuplicateRegistrationError(f"tool {name!r} already registered on {self.name!r}")
        cap = Capability(name, description, dict(fields), handler)
        self._capabilities[name] = cap
        log.debug("registered tool %r → %s", name, handler.__qualname__)
        return cap

    def tool(self, name: str, description: str, **fields: FieldSpec) -> Callable[[HandlerFn], HandlerFn]:
        """Decorator that registers *fn* under *name*."""

        def decorator(fn: HandlerFn) -> HandlerFn:
            self.register(name, description, fields, fn)
            return fn

        return decorator

    def resource(self, uri: str, name: str, description: str) -> Callable[[ReaderFn], ReaderFn]:
        """Decorator that serves *fn*'s return value under *uri*."""

        def decorator(fn: ReaderFn) -> ReaderFn:
            self._check_open()
            if uri in self._resources:
                raise DuplicateRegistrationError(f"resource {uri!r} already registered on {self.name!r}")
            self._resources[uri] = Resource(uri, name, description, fn)
            return fn

        return decorator

    def freeze(self) -> "Registry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Introspection -------------------------------------------------
    def list(self) -> list[dict[str, Any]]:
        return [cap.describe() for cap in self._capabilities.values()]

    def get(self, name: str) -> Capability | None:
        return self._capabilities.get(name)

    def list_resources(self) -> list[dict[str, Any]]:
        return [res.describe() for res in self._resources.values()]

    def get_resource(self, uri: str) -> Resource | None:
        return self._resources.get(uri)

    # -- Dispatch ------------------------------------------------------
    async def dispatch(self, name: str, arguments: Mapping[str, Any]) -> ToolResult:
        """Validate *arguments*, call the tool registered as *name*.

        Raises ``MethodNotFoundError`` for an unknown name,
        ``InvalidParamsError`` for arguments that break the schema and
        ``HandlerError`` if the handler itself fails.
        """
        cap = self._capabilities.get(name)
        if cap is None:
            raise MethodNotFoundError(name)

        accepted = validate_arguments(cap.fields, arguments)
        try:
            result = await cap.handler(accepted)
        except Exception as exc:
            log.exception("tool %s on %s failed", name, self.name)
            raise HandlerError(name, str(exc) or type(exc).__name__) from exc

        if isinstance(result, str):
            return ToolResult.text(result)
        return result

    async def read(self, uri: str) -> dict[str, Any]:
        res = self._resources.get(uri)
        if res is None:
            raise ResourceNotFoundError(uri)
        return await res.read()
