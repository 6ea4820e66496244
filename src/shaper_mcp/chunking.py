"""Chunking of large tool responses into size-bounded fragments.

Sequences are split into contiguous slices and mappings into groups of
key/value pairs, each group kept within a byte budget measured on
compact JSON. Nothing is reordered or dropped; size reduction is the
truncator's job.
"""

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any, NamedTuple, Optional

from loguru import logger

from .config import DEFAULT_LIMITS, positive_or
from .serializer import dumps
from .truncation import truncate

SEQUENCE_KIND = "sequence"
MAPPING_KIND = "mapping"

# Compact JSON overhead: "[]" / "{}" and one separator between members
_BRACKETS = 2
_SEPARATOR = 1


class ChunkResult(NamedTuple):
    chunks: list[Any]
    continuation_token: Optional[str]


def encode_continuation_token(payload: dict[str, Any]) -> str:
    """Encode a continuation descriptor as base64 compact JSON."""
    payload_json = json.dumps(payload, separators=(",", ":"))
    return base64.b64encode(payload_json.encode()).decode()


def decode_continuation_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode a continuation token produced by chunk().

    Args:
        token: Continuation token

    Returns:
        Decoded descriptor, e.g. {"kind": "sequence", "total": 1000}, or
        None if the token is malformed
    """
    if not token:
        return None

    try:
        payload_json = base64.b64decode(token, validate=True).decode()
        payload = json.loads(payload_json)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Continuation token decode failed: {e}")
        return None

    if not isinstance(payload, dict) or payload.get("kind") not in (
        SEQUENCE_KIND,
        MAPPING_KIND,
    ):
        logger.warning("Continuation token decode failed: unknown kind")
        return None

    return payload


def chunk(
    value: Any,
    max_chunk_size: int = DEFAULT_LIMITS.max_chunk_size,
    max_array_items: int = DEFAULT_LIMITS.max_array_items,
    max_object_depth: int = DEFAULT_LIMITS.max_object_depth,
) -> ChunkResult:
    """
    Split a value into ordered fragments within max_chunk_size.

    - Scalars: one fragment holding the value
    - Sequences: greedy contiguous slices; concatenating the slices in
      order gives back the input
    - Mappings: greedy groups of key/value pairs in iteration order; a
      pair that alone exceeds the budget is truncated with
      max_array_items/max_object_depth and emitted on its own

    A continuation token is returned only when more than one fragment
    results.

    Args:
        value: Value to split (expected to be truncated already)
        max_chunk_size: Budget per fragment, in compact JSON characters
        max_array_items: Sequence limit used for an oversized pair
        max_object_depth: Depth limit used for an oversized pair

    Returns:
        ChunkResult of (fragment payloads, continuation token or None)

    Raises:
        SerializationError: If a member cannot be serialized
    """
    max_chunk_size = positive_or(max_chunk_size, DEFAULT_LIMITS.max_chunk_size)

    if isinstance(value, (list, tuple)):
        chunks = _chunk_sequence(list(value), max_chunk_size)
        token = None
        if len(chunks) > 1:
            token = encode_continuation_token({"kind": SEQUENCE_KIND, "total": len(value)})
        return ChunkResult(chunks, token)

    if isinstance(value, Mapping):
        chunks = _chunk_mapping(value, max_chunk_size, max_array_items, max_object_depth)
        token = None
        if len(chunks) > 1:
            keys = [str(key) for key in value.keys()]
            token = encode_continuation_token({"kind": MAPPING_KIND, "keys": keys})
        return ChunkResult(chunks, token)

    return ChunkResult([value], None)


def _chunk_sequence(items: list[Any], max_chunk_size: int) -> list[list[Any]]:
    """Group items into contiguous slices within the budget."""
    chunks: list[list[Any]] = []
    current: list[Any] = []
    current_size = _BRACKETS

    for item in items:
        item_size = len(dumps(item, compact=True))
        added = item_size + (_SEPARATOR if current else 0)

        if current and current_size + added > max_chunk_size:
            chunks.append(current)
            current = []
            current_size = _BRACKETS
            added = item_size

        current.append(item)
        current_size += added

    if current or not chunks:
        chunks.append(current)

    return chunks


def _chunk_mapping(
    mapping: Mapping,
    max_chunk_size: int,
    max_array_items: int,
    max_object_depth: int,
) -> list[dict[Any, Any]]:
    """Group key/value pairs within the budget, isolating oversized pairs."""
    chunks: list[dict[Any, Any]] = []
    current: dict[Any, Any] = {}
    current_size = _BRACKETS

    for key, item in mapping.items():
        # Pair size without the surrounding braces
        entry_size = len(dumps({key: item}, compact=True)) - _BRACKETS

        if entry_size + _BRACKETS > max_chunk_size:
            if current:
                chunks.append(current)
                current = {}
                current_size = _BRACKETS

            isolated, record = truncate({key: item}, max_array_items, max_object_depth)
            if record.was_truncated:
                logger.debug(f"Oversized entry {key!r} truncated: {record.reason}")
            chunks.append(isolated)
            continue

        added = entry_size + (_SEPARATOR if current else 0)
        if current and current_size + added > max_chunk_size:
            chunks.append(current)
            current = {}
            current_size = _BRACKETS
            added = entry_size

        current[key] = item
        current_size += added

    if current or not chunks:
        chunks.append(current)

    return chunks
