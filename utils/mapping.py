"""
Field metadata derived from index mappings.
"""

from typing import Dict, Any


def fields_meta_from_mapping(response: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Flatten a get-mapping response into dotted field metadata.

    Object properties are walked recursively and multi-fields are listed
    under their own dotted name (``message.keyword``). When indices
    disagree on a field's type, the first one seen wins.

    Args:
        response: Response of ``indices.get_mapping``

    Returns:
        Mapping of field name to ``{"type": ..., "index": ...}``
    """
    meta: Dict[str, Dict[str, Any]] = {}
    for index_name, index_data in response.items():
        properties = index_data.get("mappings", {}).get("properties", {})
        _walk_properties(properties, "", index_name, meta)
    return meta


def _walk_properties(
    properties: Dict[str, Any],
    prefix: str,
    index_name: str,
    meta: Dict[str, Dict[str, Any]],
) -> None:
    for name, prop in properties.items():
        field = f"{prefix}{name}"
        if "properties" in prop:
            _walk_properties(prop["properties"], f"{field}.", index_name, meta)
            # nested objects still get an entry so the path is known
            if prop.get("type") != "nested":
                continue
        meta.setdefault(field, {"type": prop.get("type", "object"), "index": index_name})
        for sub, sub_prop in prop.get("fields", {}).items():
            meta.setdefault(
                f"{field}.{sub}",
                {"type": sub_prop.get("type"), "index": index_name},
            )
