"""Shaper MCP - size-bounded response formatting for MCP tools."""

__version__ = "0.1.0"

from .chunking import ChunkResult, chunk, decode_continuation_token
from .config import DEFAULT_LIMITS, Config, FormattingOptions
from .formatter import (
    Fragment,
    create_success_response,
    format_error,
    format_response,
    needs_chunking,
)
from .pagination import PaginatedResult, PaginationParams, PaginationWindow, paginate
from .serializer import SerializationError, serialize_to_json
from .sizing import estimate_size, is_too_large
from .truncation import TruncationRecord, TruncationResult, truncate

__all__ = [
    "ChunkResult",
    "Config",
    "DEFAULT_LIMITS",
    "FormattingOptions",
    "Fragment",
    "PaginatedResult",
    "PaginationParams",
    "PaginationWindow",
    "SerializationError",
    "TruncationRecord",
    "TruncationResult",
    "chunk",
    "create_success_response",
    "decode_continuation_token",
    "estimate_size",
    "format_error",
    "format_response",
    "is_too_large",
    "needs_chunking",
    "paginate",
    "serialize_to_json",
    "truncate",
    "__version__",
]
