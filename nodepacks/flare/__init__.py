"""
Flare Node Pack - Flare Network data provider API node.
"""

from .credentials import FlareCredentials
from .errors import ConfigurationError, UnknownOperationError, UnsupportedResourceError
from .manifest import CREDENTIALS, MANIFEST, NODE_CLASSES, register_nodes
from .node import FlareNetworkNode, dispatch

__all__ = [
    "CREDENTIALS",
    "ConfigurationError",
    "FlareCredentials",
    "FlareNetworkNode",
    "MANIFEST",
    "NODE_CLASSES",
    "UnknownOperationError",
    "UnsupportedResourceError",
    "dispatch",
    "register_nodes",
]
