"""Truncation of oversized tool responses.

Bounds sequence length and nesting depth, replacing what was cut with
readable marker strings and recording what happened in a
TruncationRecord.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from .config import DEFAULT_LIMITS, Config, positive_or

DEPTH_LIMIT_MARKER = "[Object depth limit exceeded]"
DEPTH_LIMIT_REASON = "Maximum object depth exceeded"
ARRAY_LIMIT_REASON = "Array size limit exceeded"

_MORE_ITEMS_PATTERN = re.compile(r"^\.\.\. \d+ more items$")


def more_items_marker(count: int) -> str:
    """Marker element appended to a shortened sequence."""
    return f"... {count} more items"


def is_more_items_marker(value: Any) -> bool:
    """Check whether value is a marker produced by sequence truncation."""
    return isinstance(value, str) and _MORE_ITEMS_PATTERN.match(value) is not None


@dataclass
class TruncationRecord:
    """
    Summary of what a truncation pass removed.

    items_omitted and reason are only set when was_truncated is True.
    original_size is filled in by the formatter with the estimated size of
    the untruncated input.
    """

    was_truncated: bool = False
    items_omitted: Optional[int] = None
    reason: Optional[str] = None
    original_size: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Wire representation, omitting unset optional fields."""
        data: dict[str, Any] = {"wasTruncated": self.was_truncated}
        if self.original_size is not None:
            data["originalSize"] = self.original_size
        if self.items_omitted is not None:
            data["itemsOmitted"] = self.items_omitted
        if self.reason is not None:
            data["reason"] = self.reason
        return data


class TruncationResult(NamedTuple):
    value: Any
    record: TruncationRecord


class _TruncationState:
    """Accumulator owned by a single truncate() call."""

    def __init__(self) -> None:
        self.was_truncated = False
        self.items_omitted = 0
        self.reason: Optional[str] = None

    def mark(self, reason: str, omitted: int = 0) -> None:
        self.was_truncated = True
        self.items_omitted += omitted
        # First cause wins
        if self.reason is None:
            self.reason = reason

    def to_record(self) -> TruncationRecord:
        return TruncationRecord(
            was_truncated=self.was_truncated,
            items_omitted=self.items_omitted if self.items_omitted > 0 else None,
            reason=self.reason if self.was_truncated else None,
        )


def truncate(
    value: Any,
    max_array_items: int = DEFAULT_LIMITS.max_array_items,
    max_object_depth: int = DEFAULT_LIMITS.max_object_depth,
) -> TruncationResult:
    """
    Bound the length of sequences and the nesting depth of a value.

    Rules, applied depth-first with the root at depth 0:
    - A list/tuple/mapping deeper than max_object_depth is replaced with
      "[Object depth limit exceeded]"
    - A sequence longer than max_array_items keeps its first
      max_array_items elements followed by a "... N more items" marker
    - Mappings keep every key; only their values are truncated
    - Scalars are returned unchanged at any depth

    The depth check runs before a node's children are visited, and the
    first cause encountered becomes the reported reason. Applying
    truncate() to its own output with the same limits is a no-op.

    Args:
        value: Value to truncate (may contain cycles; they are cut at the
            depth limit)
        max_array_items: Maximum kept elements per sequence
        max_object_depth: Maximum nesting depth kept intact

    Returns:
        TruncationResult of (truncated copy, TruncationRecord)

    Examples:
        >>> truncate(list(range(100)), max_array_items=10).record.items_omitted
        90

        >>> truncate({"a": {"b": {"c": {}}}}, max_object_depth=2).value
        {'a': {'b': {'c': '[Object depth limit exceeded]'}}}
    """
    max_array_items = positive_or(max_array_items, DEFAULT_LIMITS.max_array_items)
    max_object_depth = positive_or(max_object_depth, DEFAULT_LIMITS.max_object_depth)

    depth_limit = min(max_object_depth, Config.MAX_TRAVERSAL_DEPTH)
    state = _TruncationState()
    truncated = _truncate_recursive(value, 0, max_array_items, depth_limit, state)
    return TruncationResult(truncated, state.to_record())


def _truncate_recursive(
    value: Any,
    depth: int,
    max_array_items: int,
    depth_limit: int,
    state: _TruncationState,
) -> Any:
    """
    Recursively rebuild a value within the limits.

    Args:
        value: Value to rebuild
        depth: Depth of value (root = 0)
        max_array_items: Maximum kept elements per sequence
        depth_limit: Maximum nesting depth kept intact
        state: Accumulator for the current call

    Returns:
        Truncated copy of value
    """
    is_sequence = isinstance(value, (list, tuple))
    is_mapping = isinstance(value, Mapping)

    # Scalars pass through unchanged
    if not is_sequence and not is_mapping:
        return value

    if depth > depth_limit:
        state.mark(DEPTH_LIMIT_REASON)
        return DEPTH_LIMIT_MARKER

    if is_mapping:
        return {
            key: _truncate_recursive(child, depth + 1, max_array_items, depth_limit, state)
            for key, child in value.items()
        }

    items = list(value)

    # Output of an earlier pass: keep the marker, do not count it again
    if len(items) == max_array_items + 1 and is_more_items_marker(items[-1]):
        kept = [
            _truncate_recursive(item, depth + 1, max_array_items, depth_limit, state)
            for item in items[:-1]
        ]
        return kept + [items[-1]]

    if len(items) > max_array_items:
        omitted = len(items) - max_array_items
        state.mark(ARRAY_LIMIT_REASON, omitted)
        kept = [
            _truncate_recursive(item, depth + 1, max_array_items, depth_limit, state)
            for item in items[:max_array_items]
        ]
        return kept + [more_items_marker(omitted)]

    return [
        _truncate_recursive(item, depth + 1, max_array_items, depth_limit, state)
        for item in items
    ]
