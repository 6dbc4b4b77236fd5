"""
Flattening of decoded JSON responses.

A response such as ``{"data": [{"username": "x"}]}`` becomes
``{"data.0.username": "x"}`` so a configured jsonpath is a plain key lookup.
"""

import json
from typing import Any, Dict

from ..exceptions import InvalidPathError


def flatten(value: Any, prefix: str = "") -> Dict[str, Any]:
    """
    Obtain a single-level mapping with all leaves, indexed by dot-joined path.

    Sequences are treated as mappings keyed by their index. When two paths
    join to the same key the first one encountered is kept.

    Args:
        value: Decoded JSON mapping or sequence
        prefix: Path prefix prepended to every key

    Returns:
        Dict mapping dot-joined paths to scalar leaves
    """
    if isinstance(value, dict):
        items = value.items()
    else:
        items = enumerate(value)

    result: Dict[str, Any] = {}
    for key, item in items:
        path = f"{prefix}{key}"
        if isinstance(item, (dict, list)):
            for sub_path, leaf in flatten(item, path + ".").items():
                result.setdefault(sub_path, leaf)
        else:
            result.setdefault(path, item)
    return result


def lookup_path(flattened: Dict[str, Any], path: str) -> str:
    """
    Return the leaf stored under ``path`` as an attribute value string.

    Raises:
        InvalidPathError: If the path is not present
    """
    if path not in flattened:
        raise InvalidPathError(
            f"ExternalAttributeFilter: invalid path {path!r}",
            path=path,
        )

    leaf = flattened[path]
    if isinstance(leaf, str):
        return leaf
    # Numbers, booleans and null keep their JSON spelling
    return json.dumps(leaf)
