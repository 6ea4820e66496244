"""Offset/limit pagination for list-returning tools."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .config import Config

T = TypeVar("T")

DEFAULT_OFFSET = 0


@dataclass(frozen=True)
class PaginationParams:
    """Requested window; None means use the default."""

    offset: Optional[int] = None
    limit: Optional[int] = None

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "PaginationParams":
        """
        Extract pagination parameters from tool arguments.

        Numeric strings are coerced; values that cannot be read as
        integers are treated as absent.

        Args:
            args: Tool arguments possibly holding "offset" and "limit"

        Returns:
            PaginationParams
        """
        return cls(offset=_as_int(args.get("offset")), limit=_as_int(args.get("limit")))


@dataclass(frozen=True)
class PaginationWindow:
    offset: int
    limit: int
    total: int
    has_more: bool
    next_offset: Optional[int]
    prev_offset: Optional[int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "limit": self.limit,
            "total": self.total,
            "hasMore": self.has_more,
            "nextOffset": self.next_offset,
            "prevOffset": self.prev_offset,
        }


@dataclass
class PaginatedResult(Generic[T]):
    windowed_items: list[T]
    window: PaginationWindow

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": list(self.windowed_items),
            "pagination": self.window.to_dict(),
        }


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def paginate(
    items: Sequence[T], params: Optional[PaginationParams] = None
) -> PaginatedResult[T]:
    """
    Window a sequence by offset and limit.

    The offset is clamped into [0, total] and the limit to at least 1, so
    every request yields a valid (possibly empty) window.

    Args:
        items: Items to paginate
        params: Requested offset/limit (defaults: 0 and DEFAULT_PAGE_LIMIT)

    Returns:
        PaginatedResult with the windowed items and window metadata

    Examples:
        >>> result = paginate(list(range(10)), PaginationParams(offset=5, limit=10))
        >>> len(result.windowed_items), result.window.prev_offset
        (5, 0)
    """
    params = params or PaginationParams()
    total = len(items)

    offset = params.offset if params.offset is not None else DEFAULT_OFFSET
    limit = params.limit if params.limit is not None else Config.DEFAULT_PAGE_LIMIT

    valid_offset = max(0, min(offset, total))
    valid_limit = max(1, limit)
    end = valid_offset + valid_limit
    has_more = end < total

    window = PaginationWindow(
        offset=valid_offset,
        limit=valid_limit,
        total=total,
        has_more=has_more,
        next_offset=end if has_more else None,
        prev_offset=max(0, valid_offset - valid_limit) if valid_offset > 0 else None,
    )
    return PaginatedResult(windowed_items=list(items[valid_offset:end]), window=window)
