"""
Flare Network Nodes

Python node pack exposing the Flare Network data API (FTSO price feeds,
delegation, State Connector, FAssets, network info) as workflow nodes.

Architecture:
- node_sdk/: Node execution semantics (BaseNode, NodeContext, items, HTTP)
- node_registry/: Node pack and credential metadata
- flare_nodes/: Settings, logging and CLI
- ../nodepacks/flare/: The Flare Network node itself
"""

__version__ = "1.0.0"
