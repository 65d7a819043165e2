"""Tool-call wire-format models.

Pure data — no I/O, no business logic.  The gateway parses inbound
bodies into these and serialises results and failures from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ── Error codes (JSON-RPC 2.0 numbering, as used by MCP servers) ────
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32002

# ── Discovery request types ─────────────────────────────────────────
LIST_RESOURCES = "listResources"
READ_RESOURCE = "readResource"
LIST_TOOLS = "listTools"
CALL_TOOL = "callTool"

DISCOVERY_TYPES = frozenset({LIST_RESOURCES, READ_RESOURCE, LIST_TOOLS, CALL_TOOL})


def _arguments(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("'arguments' must be a JSON object")
    return raw


# ── Results ─────────────────────────────────────────────────────────
@dataclass(slots=True)
class TextContent:
    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(slots=True)
class ToolResult:
    """Successful tool invocation: a sequence of content items."""

    content: list[TextContent] = field(default_factory=list)

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    def to_dict(self) -> dict[str, Any]:
        return {"content": [c.to_dict() for c in self.content]}


@dataclass(slots=True)
class ToolError:
    """Failed dispatch, serialised into the HTTP error body."""

    code: int
    message: str
    details: Any = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            d["details"] = self.details
        return d


@dataclass(slots=True)
class ResourceContents:
    uri: str
    text: str
    mime_type: str = "application/json"

    def to_dict(self) -> dict[str, Any]:
        return {"uri": self.uri, "mimeType": self.mime_type, "text": self.text}


# ── Requests ────────────────────────────────────────────────────────
@dataclass(slots=True)
class ToolCallRequest:
    """Inbound ``{operation, arguments}`` request."""

    operation: str
    arguments: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "ToolCallRequest":
        """Parse a raw body — raises ``ValueError`` on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("request must be a JSON object")
        operation = raw.get("operation")
        if not isinstance(operation, str) or not operation:
            raise ValueError("missing or invalid 'operation' field")
        return cls(operation=operation, arguments=_arguments(raw.get("arguments")))

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "ToolCallRequest":
        """Parse the ``params`` of a ``callTool`` discovery request.

        Those carry the tool under ``name`` rather than ``operation``.
        """
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("missing or invalid 'name' field")
        return cls(operation=name, arguments=_arguments(params.get("arguments")))


@dataclass(slots=True)
class DiscoveryRequest:
    """Inbound ``{type, params}`` request.

    ``type`` is kept verbatim; whether it names a known sub-protocol is
    for the transport to decide (see ``is_known``).
    """

    type: str
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def is_known(self) -> bool:
        return self.type in DISCOVERY_TYPES

    @classmethod
    def from_dict(cls, raw: Any) -> "DiscoveryRequest":
        if not isinstance(raw, dict):
            raise ValueError("request must be a JSON object")
        req_type = raw.get("type")
        if not isinstance(req_type, str):
            req_type = ""
        params = raw.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ValueError("'params' must be a JSON object")
        return cls(type=req_type, params=params)
