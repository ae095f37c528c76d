"""
Node Items - Data structures flowing through workflows.

NodeItem is the fundamental data unit in workflows. Each output item
carries its JSON payload and a reference to the input item that produced it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PairedItem(BaseModel):
    """
    Reference to the source item that produced this item.

    Used for tracking data lineage through workflows.
    """
    model_config = ConfigDict(extra="forbid")

    item: int = Field(..., description="Index of source item", ge=0)


class NodeItem(BaseModel):
    """
    A single data item flowing through a workflow.

    Example:
        item = NodeItem(json_data={"address": "0xabc"})
        out = NodeItem(json_data=response, paired_item=PairedItem(item=3))
    """
    model_config = ConfigDict(extra="forbid")

    json_data: Any = Field(default_factory=dict, description="JSON data")
    paired_item: Optional[PairedItem] = Field(
        None,
        description="Reference to source item"
    )

    @classmethod
    def from_raw(cls, data: Any) -> "NodeItem":
        """
        Create NodeItem from host data.

        Accepts both wrapped items ({"json": {...}}) and bare JSON objects.
        """
        if isinstance(data, dict) and set(data) <= {"json", "binary", "pairedItem"} and "json" in data:
            return cls(json_data=data["json"])
        return cls(json_data=data)

    @classmethod
    def from_list(cls, items: List[Any]) -> List["NodeItem"]:
        """Create list of NodeItems from a list of raw items."""
        return [cls.from_raw(item) for item in items]

    def to_execution_data(self) -> Dict[str, Any]:
        """Host output format: {"json": ..., "pairedItem": {"item": i}}."""
        data: Dict[str, Any] = {"json": self.json_data}
        if self.paired_item is not None:
            data["pairedItem"] = {"item": self.paired_item.item}
        return data


def output_record(payload: Any, item_index: int) -> Dict[str, Any]:
    """Wrap a payload as the output record for input item ``item_index``."""
    return NodeItem(
        json_data=payload,
        paired_item=PairedItem(item=item_index),
    ).to_execution_data()


__all__ = [
    "NodeItem",
    "PairedItem",
    "output_record",
]
