"""
Flare Network node - dispatches a batch to the selected resource handler.

The property panel description is generated from the request templates,
so every operation's parameters are declared in exactly one place.
"""

from __future__ import annotations

from typing import Any, Dict, List

from src.node_sdk.basenode import (
    BaseNode,
    NodeExecutionData,
    NodeOperationError,
    NodeParameter,
    NodeParameterType,
)

from .credentials import CREDENTIAL_TYPE, FlareCredentials
from .errors import ConfigurationError, UnsupportedResourceError
from .handlers import RESOURCE_HANDLERS
from .templates import (
    RESOURCE_DISPLAY_NAMES,
    RESOURCES,
    ParamKind,
    ParamSpec,
    templates_for,
)


DEFAULT_RESOURCE = "priceFeeds"


# ==============================================================================
# Property generation
# ==============================================================================

def _parameter_type(spec: ParamSpec) -> NodeParameterType:
    if spec.options:
        return NodeParameterType.OPTIONS
    if spec.kind is ParamKind.NUMBER:
        return NodeParameterType.NUMBER
    if spec.kind is ParamKind.JSON:
        return NodeParameterType.JSON
    return NodeParameterType.STRING


def _resource_parameter() -> NodeParameter:
    return NodeParameter(
        name="resource",
        display_name="Resource",
        type=NodeParameterType.OPTIONS,
        no_data_expression=True,
        default=DEFAULT_RESOURCE,
        options=[{"name": RESOURCE_DISPLAY_NAMES[r], "value": r} for r in RESOURCES],
    )


def _operation_parameter(resource: str) -> NodeParameter:
    templates = list(templates_for(resource).values())
    return NodeParameter(
        name="operation",
        display_name="Operation",
        type=NodeParameterType.OPTIONS,
        no_data_expression=True,
        default=templates[0].operation,
        options=[
            {"name": t.display_name, "value": t.operation, "action": t.display_name}
            for t in templates
        ],
        display_options={"show": {"resource": [resource]}},
    )


def _field_parameters(resource: str) -> List[NodeParameter]:
    # Identical specs shared by several operations collapse into one field
    shown_for: Dict[ParamSpec, List[str]] = {}
    for template in templates_for(resource).values():
        for spec in template.params:
            shown_for.setdefault(spec, []).append(template.operation)

    return [
        NodeParameter(
            name=spec.name,
            display_name=spec.display_name,
            type=_parameter_type(spec),
            default=spec.default,
            required=spec.required,
            description=spec.description,
            options=[{"name": label, "value": value} for label, value in spec.options] or None,
            display_options={"show": {"resource": [resource], "operation": operations}},
        )
        for spec, operations in shown_for.items()
    ]


def build_parameters() -> List[Dict[str, Any]]:
    """Property-panel parameters for every resource and operation."""
    parameters = [_resource_parameter()]
    for resource in RESOURCES:
        parameters.append(_operation_parameter(resource))
    for resource in RESOURCES:
        parameters.extend(_field_parameters(resource))
    return [p.to_property() for p in parameters]


# ==============================================================================
# Dispatch
# ==============================================================================

def load_credentials(node: BaseNode) -> FlareCredentials:
    """
    Read and validate the batch credentials.

    Raises:
        ConfigurationError: credentials missing or invalid
    """
    try:
        data = node.get_credentials(CREDENTIAL_TYPE)
    except ConfigurationError:
        raise
    except NodeOperationError as e:
        raise ConfigurationError(e.message, node=node) from e
    return FlareCredentials.from_host(data)


def dispatch(node: BaseNode, resource: str, items: List[Dict[str, Any]]) -> List[NodeExecutionData]:
    """
    Route one batch to the handler of ``resource``.

    Resource, operation and credentials are checked before the first
    item is touched, so a misconfigured node fails even for an empty batch.

    Raises:
        UnsupportedResourceError: unknown resource
        UnknownOperationError: operation not part of the resource
        ConfigurationError: credentials missing or invalid
    """
    handler = RESOURCE_HANDLERS.get(resource) if isinstance(resource, str) else None
    if handler is None:
        raise UnsupportedResourceError(str(resource), node=node)

    operation = node.get_node_parameter("operation", 0, "")
    handler.template(operation, node)

    credentials = load_credentials(node)
    return handler.handle(node, operation, items, credentials)


# ==============================================================================
# Node
# ==============================================================================

class FlareNetworkNode(BaseNode):
    """
    Flare Network - FTSO price feeds, delegation, State Connector,
    FAssets and network data through the Flare data provider API.
    """

    type = "flareNetwork"
    version = 1

    description = {
        "displayName": "Flare Network",
        "name": "flareNetwork",
        "icon": "file:flare.svg",
        "group": ["transform"],
        "description": "Interact with the Flare Network API",
        "subtitle": '={{$parameter["operation"] + ": " + $parameter["resource"]}}',
        "version": 1,
        "inputs": ["main"],
        "outputs": ["main"],
        "credentials": [{"name": CREDENTIAL_TYPE, "required": True}],
    }

    properties = {
        "parameters": build_parameters(),
        "credentials": [{"name": CREDENTIAL_TYPE, "required": True}],
    }

    def execute(self) -> List[List[NodeExecutionData]]:
        """Run the selected operation over all input items."""
        items = self.get_input_data()
        resource = self.get_node_parameter("resource", 0, DEFAULT_RESOURCE)
        return [dispatch(self, resource, items)]


__all__ = [
    "DEFAULT_RESOURCE",
    "FlareNetworkNode",
    "build_parameters",
    "dispatch",
    "load_credentials",
]
