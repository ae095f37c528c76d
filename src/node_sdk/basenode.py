"""
BaseNode - Abstract base class for Python node implementations.

All nodes inherit from BaseNode and implement the execute() method.
The host runtime hands each node a NodeExecutionContext, which is the
node's only view of the outside world:

- parameters (resolved per item)
- credentials (read once per batch)
- input items
- the continue-on-fail flag
- the HTTP client used for outbound calls

execute() is synchronous.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from .expressions import get_path, resolve_expression

if TYPE_CHECKING:
    from .http import HttpClient


logger = logging.getLogger(__name__)


# ==============================================================================
# NodeParameterType
# ==============================================================================

class NodeParameterType(str, Enum):
    """Parameter types understood by the property panel."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OPTIONS = "options"
    JSON = "json"
    COLLECTION = "collection"


# ==============================================================================
# NodeParameter - Pydantic model for defining parameters
# ==============================================================================

class NodeParameter(BaseModel):
    """
    A single parameter in the node's properties.

    Dumped with ``by_alias=True`` it produces the camelCase dict the
    property panel expects.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True, use_enum_values=True)

    name: str = Field(..., description="Parameter key (internal name)")
    display_name: str = Field(..., alias="displayName", description="Human-readable label")
    type: NodeParameterType = Field(..., description="Parameter type")
    default: Any = Field(None, description="Default value")
    required: bool = Field(False, description="Is parameter required?")
    no_data_expression: Optional[bool] = Field(None, alias="noDataExpression")
    description: Optional[str] = Field(None, description="Help text")
    placeholder: Optional[str] = Field(None, description="Input placeholder")
    options: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Options for options type"
    )
    display_options: Optional[Dict[str, Any]] = Field(
        None,
        alias="displayOptions",
        description="Conditional visibility"
    )

    def to_property(self) -> Dict[str, Any]:
        """Property-panel dict for this parameter."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ==============================================================================
# NodeExecutionData - Output data format
# ==============================================================================

class NodeExecutionData(TypedDict, total=False):
    """
    Single item of execution output data.

    Format: {"json": {...}, "pairedItem": {"item": 0}}
    """
    json: Any
    binary: Optional[Dict[str, Any]]
    pairedItem: Optional[Dict[str, int]]


# ==============================================================================
# Errors
# ==============================================================================

class NodeOperationError(Exception):
    """Error during node operation."""

    def __init__(
        self,
        message: str,
        node: Optional["BaseNode"] = None,
        item_index: Optional[int] = None,
    ) -> None:
        self.message = message
        self.node = node
        self.item_index = item_index
        # Output records of the items that succeeded before this failure
        self.partial_results: List[Dict[str, Any]] = []
        super().__init__(message)


class NodeApiError(NodeOperationError):
    """Error from external API call."""

    def __init__(
        self,
        message: str,
        node: Optional["BaseNode"] = None,
        status_code: Optional[int] = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(message, node)
        self.status_code = status_code
        self.response_body = response_body


# ==============================================================================
# BaseNode - Abstract base class
# ==============================================================================

class BaseNode(ABC):
    """
    Abstract base class for all Python node implementations.

    Nodes define:
    - type: Unique identifier (e.g., "flareNetwork")
    - version: Node version number
    - description: Node metadata dict
    - properties: Parameters and credentials

    And implement execute() which processes input items.

    All execution is synchronous.
    """

    # Required class attributes (override in subclasses)
    type: str = "base"
    version: int = 1

    description: Dict[str, Any] = {
        "displayName": "Base Node",
        "name": "base",
        "description": "",
        "group": [],
        "version": 1,
        "inputs": ["main"],
        "outputs": ["main"],
    }

    properties: Dict[str, Any] = {
        "parameters": [],
        "credentials": [],
    }

    def __init__(self) -> None:
        """Initialize node instance."""
        self.logger = logging.getLogger(f"node.{self.type}")
        self._context: Optional[NodeExecutionContext] = None

    @abstractmethod
    def execute(self) -> List[List[NodeExecutionData]]:
        """
        Execute node operation.

        Returns:
            List[List[NodeExecutionData]]: Nested list of execution results.
            - Outer list represents output branches (usually 1)
            - Inner list represents items in that branch

        Raises:
            NodeOperationError: On operation failure
            NodeApiError: On API call failure
        """
        raise NotImplementedError

    # ==== Context Management ====

    def set_context(self, context: "NodeExecutionContext") -> None:
        """Set the execution context."""
        self._context = context

    @property
    def context(self) -> "NodeExecutionContext":
        if self._context is None:
            raise NodeOperationError("No context set", node=self)
        return self._context

    # ==== Helper methods for subclasses ====

    def get_node_parameter(
        self,
        name: str,
        item_index: int = 0,
        default: Any = None,
    ) -> Any:
        """
        Get parameter value.

        Args:
            name: Parameter name (dot notation allowed)
            item_index: Index of item (for expression resolution)
            default: Default if not set
        """
        if self._context is None:
            return default
        return self._context.get_node_parameter(name, item_index, default)

    def get_credentials(self, name: str) -> Dict[str, Any]:
        """
        Get credentials by type name.

        Args:
            name: Credential type name (e.g., "flareNetworkApi")

        Returns:
            Credentials dict with decrypted values
        """
        return self.context.get_credentials(name)

    def get_input_data(self) -> List[Dict[str, Any]]:
        """
        Get input items from previous node.

        Returns:
            List of input items, each with 'json' key.
        """
        if self._context is None:
            return []
        return self._context.get_input_data()

    def continue_on_fail(self) -> bool:
        """Whether per-item failures are captured instead of raised."""
        if self._context is None:
            return False
        return self._context.continue_on_fail

    @property
    def http_client(self) -> "HttpClient":
        """HTTP client for outbound calls (timeout-bounded)."""
        return self.context.http_client


# ==============================================================================
# NodeExecutionContext - Runtime context for node execution
# ==============================================================================

class NodeExecutionContext:
    """
    Runtime context provided to nodes during execution.

    Provides access to:
    - Parameters (with per-item expression resolution)
    - Credentials
    - Input data
    - The continue-on-fail flag
    - HTTP client
    """

    def __init__(
        self,
        parameters: Dict[str, Any],
        credentials: Dict[str, Dict[str, Any]],
        input_data: List[Dict[str, Any]],
        continue_on_fail: bool = False,
        http_client: Optional["HttpClient"] = None,
        workflow_id: Optional[str] = None,
        node_name: Optional[str] = None,
    ) -> None:
        self._parameters = parameters
        self._credentials = credentials
        self._input_data = input_data
        self._http_client = http_client
        self.continue_on_fail = continue_on_fail
        self.workflow_id = workflow_id
        self.node_name = node_name

    def get_node_parameter(
        self,
        name: str,
        item_index: int = 0,
        default: Any = None,
    ) -> Any:
        """
        Get parameter value for one item.

        Supports dot notation ('additionalFields.limit') and resolves
        ``{{ $json.x }}`` expressions against the item at ``item_index``.
        """
        missing = object()
        value = get_path(self._parameters, name, missing)
        if value is missing:
            return default

        item_json: Dict[str, Any] = {}
        if 0 <= item_index < len(self._input_data):
            item_json = self._input_data[item_index].get("json") or {}

        return resolve_expression(value, item_json)

    def get_credentials(self, name: str) -> Dict[str, Any]:
        """Get credentials by type name."""
        if name not in self._credentials:
            raise NodeOperationError(f"Credentials '{name}' not found")
        return self._credentials[name]

    def get_input_data(self) -> List[Dict[str, Any]]:
        """Get input items."""
        return self._input_data

    @property
    def http_client(self) -> "HttpClient":
        """
        HTTP client shared by all items of the batch.

        Built lazily from settings when the host did not inject one.
        """
        if self._http_client is None:
            from src.flare_nodes.config import get_settings
            from .http import HttpClient

            self._http_client = HttpClient(timeout=get_settings().http_timeout_s)
        return self._http_client


__all__ = [
    "BaseNode",
    "NodeExecutionContext",
    "NodeExecutionData",
    "NodeParameter",
    "NodeParameterType",
    "NodeOperationError",
    "NodeApiError",
]
