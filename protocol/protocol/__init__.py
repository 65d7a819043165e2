"""protocol — tool-call wire-format models."""

from protocol.toolcall import (
    CALL_TOOL,
    DISCOVERY_TYPES,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    LIST_RESOURCES,
    LIST_TOOLS,
    METHOD_NOT_FOUND,
    READ_RESOURCE,
    RESOURCE_NOT_FOUND,
    DiscoveryRequest,
    ResourceContents,
    TextContent,
    ToolCallRequest,
    ToolError,
    ToolResult,
)

__all__ = [
    "ToolCallRequest",
    "DiscoveryRequest",
    "ToolResult",
    "ToolError",
    "TextContent",
    "ResourceContents",
    "DISCOVERY_TYPES",
    "LIST_RESOURCES",
    "READ_RESOURCE",
    "LIST_TOOLS",
    "CALL_TOOL",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "RESOURCE_NOT_FOUND",
]
