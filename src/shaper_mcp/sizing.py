"""Approximate size estimation for tool responses.

Walks a value once, without serializing it, and charges a fixed cost per
node. Used as a cheap admission check before the full serialization.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Iterator

# Per-type costs in size-units
NULL_COST = 4
BOOL_COST = 4
NUMBER_COST = 8
DATE_COST = 8
CONTAINER_HEADER_COST = 8
CHAR_COST = 2

DEFAULT_MAX_SIZE = 50_000_000

_EXHAUSTED = object()


def _string_cost(text: str) -> int:
    """Cost of a string: two units per UTF-16 code unit."""
    return len(text.encode("utf-16-le", "surrogatepass"))


def _scalar_cost(value: Any) -> int:
    if value is None:
        return NULL_COST
    if isinstance(value, bool):
        return BOOL_COST
    if isinstance(value, (int, float)):
        return NUMBER_COST
    if isinstance(value, str):
        return _string_cost(value)
    if isinstance(value, (datetime, date)):
        return DATE_COST
    # Unknown objects (callables, sentinels, ...) carry no wire weight
    return 0


def estimate_size(value: Any) -> int:
    """
    Estimate the wire footprint of a value.

    Costs:
    - None, bool: 4
    - int, float: 8
    - str: 2 per UTF-16 code unit
    - list/tuple/mapping: 8 + children; mapping keys add 2 per code unit

    A composite reached a second time (cycle or shared substructure)
    costs nothing, so the walk terminates on cyclic graphs and
    under-counts shared data.

    The traversal keeps an explicit stack of child iterators, one per open
    composite, so deeply nested input cannot exhaust the interpreter
    stack and wide input does not grow the stack.

    Args:
        value: Value to measure

    Returns:
        Approximate size in size-units
    """
    total = 0
    visited: set[int] = set()
    # One pending-children iterator per open composite
    stack: list[Iterator[Any]] = [iter((value,))]

    while stack:
        current = next(stack[-1], _EXHAUSTED)
        if current is _EXHAUSTED:
            stack.pop()
            continue

        if isinstance(current, (list, tuple)):
            if id(current) in visited:
                continue
            visited.add(id(current))
            total += CONTAINER_HEADER_COST
            stack.append(iter(current))
        elif isinstance(current, Mapping):
            if id(current) in visited:
                continue
            visited.add(id(current))
            total += CONTAINER_HEADER_COST
            stack.append(_charged_values(current))
        else:
            total += _scalar_cost(current)

    return total


def _charged_values(mapping: Mapping) -> Iterator[Any]:
    """Yield each key as a str (charged like a string value), then its value."""
    for key, child in mapping.items():
        yield str(key)
        yield child


def is_too_large(value: Any, max_size: int = DEFAULT_MAX_SIZE) -> bool:
    """
    Check whether a value's estimated size exceeds max_size.

    Args:
        value: Value to check
        max_size: Maximum acceptable size in size-units

    Returns:
        True if the estimate is larger than max_size
    """
    return estimate_size(value) > max_size
