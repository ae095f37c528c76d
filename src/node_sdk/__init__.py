"""
Node SDK - Minimal Python node execution semantics.

This package provides the runtime for executing Python nodes:
- NodeItem: Data item flowing through workflows
- NodeExecutionContext: Runtime context for a node (the host interface)
- BaseNode: Abstract base class for node implementations
- HttpClient: Timeout-bounded HTTP client with error classification

All nodes execute synchronously.
"""

from .items import NodeItem, PairedItem, output_record
from .basenode import (
    BaseNode,
    NodeExecutionContext,
    NodeExecutionData,
    NodeParameter,
    NodeParameterType,
    NodeOperationError,
    NodeApiError,
)
from .http import (
    HttpClient,
    HttpResponse,
    NodeTimeoutError,
    RemoteApiError,
    TransportError,
)

__all__ = [
    # Items
    "NodeItem",
    "PairedItem",
    "output_record",
    "NodeExecutionData",
    # Context
    "NodeExecutionContext",
    # Base class
    "BaseNode",
    "NodeParameter",
    "NodeParameterType",
    # Errors
    "NodeOperationError",
    "NodeApiError",
    "RemoteApiError",
    "TransportError",
    "NodeTimeoutError",
    # HTTP
    "HttpClient",
    "HttpResponse",
]
