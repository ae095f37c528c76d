"""
Node Pack Models - Metadata structures for nodes, credentials and node packs.

The host runtime owns registration; a pack only describes itself through
these models (see nodepacks/flare/manifest.py).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class NodeDefinition(BaseModel):
    """
    Metadata about a node class.

    Contains everything the host needs to list and instantiate the node.
    """
    model_config = ConfigDict(extra="allow")

    # Identity
    node_type: str = Field(..., description="Unique node type identifier")
    version: int = Field(1, description="Node version")

    # Display
    display_name: str = Field(..., description="Human-readable name")
    description: str = Field("", description="Node description")
    icon: str = Field("file:icon.svg", description="Node icon")
    group: List[str] = Field(default_factory=list, description="Categories")

    # Technical
    node_class: Optional[str] = Field(None, description="Fully qualified class name")
    node_pack: Optional[str] = Field(None, description="Source node pack")

    # Runtime
    inputs: List[str] = Field(default_factory=lambda: ["main"])
    outputs: List[str] = Field(default_factory=lambda: ["main"])
    credentials: List[Dict[str, Any]] = Field(default_factory=list)
    parameters: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_node_class(cls, node_class: Type, node_pack: Optional[str] = None) -> "NodeDefinition":
        """Create definition from a BaseNode class."""
        node_type = getattr(node_class, "type", node_class.__name__.lower())
        version = getattr(node_class, "version", 1)
        description = getattr(node_class, "description", {}) or {}
        properties = getattr(node_class, "properties", {}) or {}

        credentials = description.get("credentials") or properties.get("credentials", [])

        return cls(
            node_type=node_type,
            version=version,
            display_name=description.get("displayName", node_type),
            description=description.get("description", ""),
            icon=description.get("icon", "file:icon.svg"),
            group=description.get("group", []),
            node_class=f"{node_class.__module__}.{node_class.__name__}",
            node_pack=node_pack,
            inputs=description.get("inputs", ["main"]),
            outputs=description.get("outputs", ["main"]),
            credentials=credentials,
            parameters=properties.get("parameters", []),
        )

    def parameters_named(self, name: str) -> List[Dict[str, Any]]:
        """All parameter entries with the given name (one per displayOptions branch)."""
        return [p for p in self.parameters if p.get("name") == name]


class CredentialDefinition(BaseModel):
    """
    Definition of a credential type.
    """
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Credential type name")
    display_name: str = Field(..., description="Human-readable name")
    documentation_url: Optional[str] = Field(None, description="Provider documentation")

    # Fields
    properties: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Credential properties/fields"
    )

    # Authentication
    auth_type: str = Field("generic", description="Auth type: generic, oauth2, etc.")

    def property_names(self) -> List[str]:
        return [p["name"] for p in self.properties]


class NodePackManifest(BaseModel):
    """
    Manifest for a node pack (collection of nodes).

    Used by the host for discovery of bundled nodes.
    """
    model_config = ConfigDict(extra="allow")

    # Identity
    name: str = Field(..., description="Pack name (e.g., 'flare')")
    version: str = Field("1.0.0", description="Pack version")
    description: str = Field("", description="Pack description")

    # Author
    author: str = Field("", description="Author name")
    license: str = Field("MIT", description="License type")

    # Contents
    nodes: List[str] = Field(
        default_factory=list,
        description="List of node types in this pack"
    )
    credentials: List[str] = Field(
        default_factory=list,
        description="List of credential types in this pack"
    )

    # Technical
    entry_point: str = Field(
        "",
        description="Module path for node discovery (e.g., 'nodepacks.flare')"
    )


__all__ = [
    "NodeDefinition",
    "NodePackManifest",
    "CredentialDefinition",
]
