"""Response formatting with truncation and chunking support.

Turns an arbitrary tool result into an ordered list of protocol-safe
fragments. Small results become a single fragment; results over the
response budget are truncated once and then split into chunks that each
carry positional metadata.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from loguru import logger

from .chunking import chunk
from .config import FormattingOptions
from .serializer import SerializationError, render_text, serialize_to_json
from .sizing import estimate_size
from .truncation import TruncationRecord, truncate

OptionsLike = Union[FormattingOptions, Mapping[str, Any], None]


@dataclass
class Fragment:
    """
    One protocol message produced by formatting a value.

    Chunked fragments carry is_chunked, chunk_index and total_chunks; the
    last one also carries the continuation token. truncation is set on
    every fragment produced from a truncated source.
    """

    text: str
    is_chunked: Optional[bool] = None
    chunk_index: Optional[int] = None
    total_chunks: Optional[int] = None
    continuation_token: Optional[str] = None
    truncation: Optional[TruncationRecord] = None
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Wire representation, omitting unset optional fields."""
        data: dict[str, Any] = {"text": self.text}
        if self.is_chunked is not None:
            data["isChunked"] = self.is_chunked
        if self.chunk_index is not None:
            data["chunkIndex"] = self.chunk_index
        if self.total_chunks is not None:
            data["totalChunks"] = self.total_chunks
        if self.continuation_token is not None:
            data["continuationToken"] = self.continuation_token
        if self.truncation is not None:
            data["truncation"] = self.truncation.to_dict()
        if self.is_error:
            data["isError"] = True
        return data


def needs_chunking(value: Any, options: OptionsLike = None) -> bool:
    """
    Check whether a value must go through the chunking path.

    The cheap estimate is consulted first; values under the budget are
    confirmed by serializing them. Failure of either step counts as
    oversized.

    Args:
        value: Value to check
        options: Formatting options (max_response_size is used)

    Returns:
        True if the value should be chunked
    """
    limits = FormattingOptions.resolve(options)

    try:
        if estimate_size(value) > limits.max_response_size:
            return True
        return len(serialize_to_json(value)) > limits.max_response_size
    except Exception as e:
        logger.warning(f"Size check failed ({type(e).__name__}: {e}), assuming oversized")
        return True


def format_error(error: Union[BaseException, str]) -> Fragment:
    """
    Format an error as a single error fragment.

    Args:
        error: Exception or message

    Returns:
        Fragment with is_error set
    """
    if isinstance(error, BaseException):
        message = str(error) or type(error).__name__
    else:
        message = str(error)
    return Fragment(text=message, is_error=True)


def format_response(
    value: Any, options: OptionsLike = None, message: Optional[str] = None
) -> list[Fragment]:
    """
    Format a value into ordered fragments.

    Flow:
    1. needs_chunking() decides between single and chunked output
    2. The value is truncated once with max_array_items/max_object_depth
    3. Single: the truncated value becomes one fragment
       Chunked: the truncated value is split by chunk(); each piece is
       rendered as compact JSON, the measure chunk() budgets, and becomes
       a fragment with chunk_index/total_chunks and the continuation
       token on the last one
    4. message, if given, is prefixed to the first fragment's text

    Serialization failures are returned as a single error fragment rather
    than raised.

    Args:
        value: Tool result to format
        options: Formatting options (missing or invalid fields use defaults)
        message: Optional message prefixed to the first fragment

    Returns:
        Ordered list of fragments
    """
    limits = FormattingOptions.resolve(options)

    try:
        fragments = _build_fragments(value, limits)
    except SerializationError as e:
        logger.warning(f"Response serialization failed: {e}")
        return [format_error(f"Failed to format response: {e}")]
    except Exception as e:
        logger.error(f"Unexpected error while formatting response: {e}")
        return [format_error(f"Failed to format response: {e}")]

    if message and fragments:
        fragments[0].text = f"{message}\n\n{fragments[0].text}"

    return fragments


def create_success_response(
    value: Any, message: Optional[str] = None, options: OptionsLike = None
) -> list[Fragment]:
    """Format a successful tool result, prefixing message to the first fragment."""
    return format_response(value, options, message=message)


def _build_fragments(value: Any, limits: FormattingOptions) -> list[Fragment]:
    chunked = needs_chunking(value, limits)
    truncated, record = truncate(value, limits.max_array_items, limits.max_object_depth)

    truncation = None
    if record.was_truncated:
        record.original_size = _safe_estimate(value)
        truncation = record
        logger.debug(
            f"Response truncated: {record.reason} (items omitted: {record.items_omitted})"
        )

    if not chunked:
        return [Fragment(text=render_text(truncated), truncation=truncation)]

    chunks, continuation_token = chunk(
        truncated,
        limits.max_chunk_size,
        limits.max_array_items,
        limits.max_object_depth,
    )
    total = len(chunks)
    logger.debug(f"Response split into {total} chunk(s)")

    fragments = []
    for index, piece in enumerate(chunks):
        is_last = index == total - 1
        fragments.append(
            Fragment(
                text=render_text(piece, compact=True),
                is_chunked=True,
                chunk_index=index,
                total_chunks=total,
                continuation_token=continuation_token if is_last else None,
                truncation=truncation,
            )
        )
    return fragments


def _safe_estimate(value: Any) -> Optional[int]:
    try:
        return estimate_size(value)
    except Exception as e:
        logger.debug(f"Size estimate unavailable: {e}")
        return None
