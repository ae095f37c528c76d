"""
Node Pack Metadata - Descriptions of nodes, credentials and node packs.

This package provides:
- NodeDefinition: Metadata about a node class
- CredentialDefinition: Metadata about a credential type
- NodePackManifest: Package metadata for a node pack

Packs are exposed to the host through the ``flare_nodes.nodepacks``
entry point group.
"""

from .models import CredentialDefinition, NodeDefinition, NodePackManifest

NODE_PACK_ENTRY_POINT = "flare_nodes.nodepacks"

__all__ = [
    "CredentialDefinition",
    "NodeDefinition",
    "NodePackManifest",
    "NODE_PACK_ENTRY_POINT",
]
