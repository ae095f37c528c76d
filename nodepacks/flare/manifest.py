"""
Flare Node Pack Manifest - Registration function for entry-points.
"""

from src.node_registry.models import NodeDefinition, NodePackManifest

from .credentials import CREDENTIAL_TYPE, FLARE_NETWORK_API
from .node import FlareNetworkNode


MANIFEST = NodePackManifest(
    name="flare",
    version="1.0.0",
    description="Flare Network API: FTSO, delegation, State Connector, FAssets and network data",
    author="flare-nodes",
    license="MIT",
    nodes=[FlareNetworkNode.type],
    credentials=[CREDENTIAL_TYPE],
    entry_point="nodepacks.flare",
)


# Node classes by type
NODE_CLASSES = {
    FlareNetworkNode.type: FlareNetworkNode,
}

CREDENTIALS = {
    CREDENTIAL_TYPE: FLARE_NETWORK_API,
}


def register_nodes():
    """
    Entry point function for node pack discovery.

    Returns tuple of (manifest, node_classes).
    """
    return MANIFEST, NODE_CLASSES


def node_definitions():
    """NodeDefinition for every node in the pack."""
    return [
        NodeDefinition.from_node_class(node_class, node_pack=MANIFEST.name)
        for node_class in NODE_CLASSES.values()
    ]


__all__ = [
    "CREDENTIALS",
    "MANIFEST",
    "NODE_CLASSES",
    "node_definitions",
    "register_nodes",
]
