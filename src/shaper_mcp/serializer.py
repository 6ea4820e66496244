"""JSON serialization helpers for tool responses.

Produces the text carried by each fragment, plus optional field
filtering and a compact summary form for very large sequences.
"""

import json
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Iterable, Optional

DEPTH_EXCEEDED_MARKER = "[Maximum depth exceeded]"

EFFICIENT_ARRAY_THRESHOLD = 100
EFFICIENT_SAMPLE_SIZE = 10


class SerializationError(ValueError):
    """Raised when a value cannot be represented as JSON text."""


def _json_default(value: Any) -> Any:
    """Fallback encoder for values json does not handle natively."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(value: Any, *, indent: Optional[int] = 2, compact: bool = False) -> str:
    """
    Serialize a value to JSON text.

    Args:
        value: Value to serialize
        indent: Indentation width for pretty output (ignored when compact)
        compact: Use the most compact separators and no indentation

    Returns:
        JSON text

    Raises:
        SerializationError: If the value contains unsupported types,
            non-finite floats, circular references, or nests beyond the
            interpreter limit
    """
    try:
        if compact:
            return json.dumps(
                value,
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
                default=_json_default,
            )
        return json.dumps(
            value, indent=indent, ensure_ascii=False, allow_nan=False, default=_json_default
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(str(e) or type(e).__name__) from e


def serialize_to_json(
    data: Any,
    include_fields: Optional[Iterable[str]] = None,
    exclude_fields: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
) -> str:
    """
    Serialize data to indented JSON with optional field filtering.

    Args:
        data: Value to serialize
        include_fields: Keep only these mapping keys (all if not given)
        exclude_fields: Drop these mapping keys
        max_depth: Replace subtrees deeper than this with a marker

    Returns:
        Two-space indented JSON text

    Raises:
        SerializationError: If data cannot be serialized
    """
    if include_fields or exclude_fields or max_depth is not None:
        data = filter_object_fields(
            data,
            include_fields=include_fields,
            exclude_fields=exclude_fields,
            max_depth=max_depth,
        )
    return dumps(data, indent=2)


def filter_object_fields(
    data: Any,
    include_fields: Optional[Iterable[str]] = None,
    exclude_fields: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
) -> Any:
    """
    Copy data keeping only the selected mapping keys at every level.

    Args:
        data: Value to filter
        include_fields: Keep only these keys (empty or None keeps all)
        exclude_fields: Drop these keys
        max_depth: Depth past which subtrees collapse to a marker string

    Returns:
        Filtered copy of data

    Raises:
        SerializationError: If data contains a circular reference
    """
    include = set(include_fields) if include_fields else None
    exclude = set(exclude_fields) if exclude_fields else None
    return _filter(data, include, exclude, max_depth, 0, set())


def _filter(
    data: Any,
    include: Optional[set],
    exclude: Optional[set],
    max_depth: Optional[int],
    depth: int,
    ancestors: set,
) -> Any:
    if max_depth is not None and depth > max_depth:
        return DEPTH_EXCEEDED_MARKER

    is_sequence = isinstance(data, (list, tuple))
    if not is_sequence and not isinstance(data, Mapping):
        return data

    if id(data) in ancestors:
        raise SerializationError("Circular reference detected")
    ancestors.add(id(data))

    try:
        if is_sequence:
            return [
                _filter(item, include, exclude, max_depth, depth + 1, ancestors)
                for item in data
            ]

        result = {}
        for key, value in data.items():
            if include is not None and key not in include:
                continue
            if exclude is not None and key in exclude:
                continue
            result[key] = _filter(value, include, exclude, max_depth, depth + 1, ancestors)
        return result
    finally:
        ancestors.discard(id(data))


def create_efficient_representation(
    data: Any,
    include_fields: Optional[Iterable[str]] = None,
    exclude_fields: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
) -> Any:
    """
    Convert a large value into a more compact representation.

    Sequences longer than 100 items are replaced with a summary:
    {
        "_type": "array",
        "length": N,
        "summary": "Array with N items",
        "sample": [first 10 items]
    }

    Mappings are field-filtered; scalars are returned unchanged.

    Args:
        data: Value to convert
        include_fields: Keep only these mapping keys
        exclude_fields: Drop these mapping keys
        max_depth: Depth limit applied when filtering mappings

    Returns:
        Compact representation of data
    """
    if isinstance(data, (list, tuple)):
        if len(data) > EFFICIENT_ARRAY_THRESHOLD:
            return {
                "_type": "array",
                "length": len(data),
                "summary": f"Array with {len(data)} items",
                "sample": [
                    create_efficient_representation(
                        item, include_fields, exclude_fields, max_depth
                    )
                    for item in data[:EFFICIENT_SAMPLE_SIZE]
                ],
            }
        return [
            create_efficient_representation(item, include_fields, exclude_fields, max_depth)
            for item in data
        ]

    if isinstance(data, Mapping):
        return filter_object_fields(data, include_fields, exclude_fields, max_depth)

    return data


def render_text(value: Any, compact: bool = False) -> str:
    """
    Render a value as fragment text.

    Strings are returned verbatim, other scalars as JSON literals and
    composites as two-space indented JSON, or as compact JSON when
    compact is set.

    Raises:
        SerializationError: If value cannot be serialized
    """
    if isinstance(value, str):
        return value
    return dumps(value, indent=2, compact=compact)
