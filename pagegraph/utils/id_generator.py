"""
ID and digest utilities for PageGraph.

Everything here is deterministic so that re-ingesting identical input
yields identical identity:
- Nodes: UUIDv5 over "{type_name}:{natural_key}"
- Content digests: SHA-256 over canonical JSON of the attributes
- Asset locators: SHA-256 over the locator string
"""

import hashlib
import json
from collections.abc import Mapping
from typing import Any
from uuid import NAMESPACE_URL, uuid5

NODE_NAMESPACE = uuid5(NAMESPACE_URL, "pagegraph://nodes")


def _normalize(value: Any) -> Any:
    # Integral floats hash like the equal int, matching dict equality.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {key: _normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """
    Serialize a value to JSON with sorted keys and no insignificant whitespace.

    Numbers that compare equal serialize identically, so 1 and 1.0 give the
    same text.

    Args:
        value: JSON-compatible value (non-JSON scalars are stringified)

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        _normalize(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )


def generate_node_id(type_name: str, natural_key: Any) -> str:
    """
    Generate a stable Node ID.

    Args:
        type_name: Declared type of the node
        natural_key: Value of the type's natural key field

    Returns:
        UUID string, identical for identical (type_name, natural_key)
    """
    return str(uuid5(NODE_NAMESPACE, f"{type_name}:{natural_key}"))


def compute_content_digest(attributes: dict[str, Any]) -> str:
    """
    Compute the content digest of a node's attributes.

    Args:
        attributes: Node attribute mapping

    Returns:
        SHA-256 hex digest, independent of key order
    """
    return hashlib.sha256(canonical_json(attributes).encode("utf-8")).hexdigest()


def hash_locator(locator: str) -> str:
    """
    Hash a remote asset locator for cache keying.

    Args:
        locator: Asset URL

    Returns:
        SHA-256 hex digest of the locator
    """
    return hashlib.sha256(locator.encode("utf-8")).hexdigest()
