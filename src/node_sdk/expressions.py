"""
Parameter expressions - per-item resolution of node parameter values.

Supports the subset of n8n expressions that data-mapping nodes rely on:

- ``={{ $json.path }}``: the whole value is replaced by the raw value found
  at ``path`` in the current item's JSON (type preserved).
- ``"Order {{ $json.id }}"``: embedded placeholders are substituted as text.

Paths use dot notation with numeric segments for list indexes
(``$json.items.0.name``). Unknown paths resolve to ``None`` (or ``""`` when
substituted into text).
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional


PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*\$json(?:\.([\w.\-]+))?\s*\}\}")
FULL_EXPRESSION_PATTERN = re.compile(r"^=\{\{\s*\$json(?:\.([\w.\-]+))?\s*\}\}$")


def get_path(data: Any, path: Optional[str], default: Any = None) -> Any:
    """
    Walk ``data`` following a dotted path.

    Examples: 'address', 'additionalFields.limit', 'providers.2'
    """
    if not path:
        return data

    current = data
    for key in path.split("."):
        if key.isdigit():
            index = int(key)
            if isinstance(current, list) and 0 <= index < len(current):
                current = current[index]
            else:
                return default
        elif isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default
    return current


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def resolve_expression(value: Any, item_json: Optional[Dict[str, Any]]) -> Any:
    """
    Resolve expressions in a parameter value against one item's JSON.

    Non-string values are returned unchanged.
    """
    if not isinstance(value, str) or "{{" not in value:
        return value

    item_json = item_json or {}

    full = FULL_EXPRESSION_PATTERN.match(value.strip())
    if full:
        return get_path(item_json, full.group(1))

    template = value[1:] if value.startswith("=") else value
    return PLACEHOLDER_PATTERN.sub(
        lambda match: _as_text(get_path(item_json, match.group(1))),
        template,
    )


__all__ = [
    "get_path",
    "resolve_expression",
]
