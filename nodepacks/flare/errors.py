"""
Flare node errors.

Configuration errors describe a node that cannot run at all (bad resource,
bad operation, bad credentials). They abort the batch even when
continue-on-fail is enabled. Per-item failures are the SDK's
RemoteApiError / TransportError / NodeOperationError.
"""

from __future__ import annotations

from typing import Optional

from src.node_sdk.basenode import BaseNode, NodeOperationError


class ConfigurationError(NodeOperationError):
    """The node is configured in a way no item can succeed with."""


class UnsupportedResourceError(ConfigurationError):
    def __init__(self, resource: str, node: Optional[BaseNode] = None) -> None:
        super().__init__(f'The resource "{resource}" is not supported', node=node)
        self.resource = resource


class UnknownOperationError(ConfigurationError):
    def __init__(self, resource: str, operation: str, node: Optional[BaseNode] = None) -> None:
        super().__init__(
            f'The operation "{operation}" is not known for resource "{resource}"',
            node=node,
        )
        self.resource = resource
        self.operation = operation


__all__ = [
    "ConfigurationError",
    "UnsupportedResourceError",
    "UnknownOperationError",
]
