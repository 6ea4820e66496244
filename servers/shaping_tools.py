"""Response shaping tools as a standalone FastMCP server.

Tools:
- paginate_items: Window a list by offset/limit and return shaped fragments
- format_payload: Truncate and chunk an arbitrary JSON payload
- describe_continuation_token: Decode the token attached to a chunked response

Every tool returns the ordered list of wire-shape fragments produced by
the formatter. Clients must relay them in order.
"""

from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from loguru import logger

from shaper_mcp.chunking import decode_continuation_token
from shaper_mcp.formatter import Fragment
from shaper_mcp.tooling import ToolHandler

# Create FastMCP server instance for shaping tools
shaping_server = FastMCP("ShapingTools")


class PaginateItemsHandler(ToolHandler):
    """Handler for the paginate_items tool."""

    async def execute(self, args: dict[str, Any]) -> list[Fragment]:
        return await self.handle_execution(self._paginate, args)

    async def _paginate(self, args: dict[str, Any]) -> list[Fragment]:
        items = args.get("items")
        if not isinstance(items, list):
            raise ValueError("'items' must be a list")

        params = self.get_pagination_params(args)
        title = args.get("title")
        return self.format_paginated_success(items, params, title)


class FormatPayloadHandler(ToolHandler):
    """Handler for the format_payload tool."""

    async def execute(self, args: dict[str, Any]) -> list[Fragment]:
        return await self.handle_execution(self._format, args)

    async def _format(self, args: dict[str, Any]) -> list[Fragment]:
        return self.format_success(args.get("payload"), args.get("message"))


def _to_wire(fragments: list[Fragment]) -> list[dict[str, Any]]:
    return [fragment.to_dict() for fragment in fragments]


@shaping_server.tool()
async def paginate_items(
    items: list[Any],
    offset: int = 0,
    limit: int = 10,
    title: Optional[str] = None,
) -> list[dict[str, Any]]:
    """
    Return one page of a list.

    Args:
        items: Items to paginate
        offset: Number of items to skip. Default is 0.
        limit: Maximum number of items to return. Default is 10.
        title: Optional heading shown above the page summary

    Returns:
        Ordered response fragments
    """
    handler = PaginateItemsHandler()
    fragments = await handler.execute(
        {"items": items, "offset": offset, "limit": limit, "title": title}
    )
    logger.debug(f"paginate_items returned {len(fragments)} fragment(s)")
    return _to_wire(fragments)


@shaping_server.tool()
async def format_payload(
    payload: Any,
    message: Optional[str] = None,
    max_response_size: Optional[int] = None,
    max_array_items: Optional[int] = None,
    max_object_depth: Optional[int] = None,
    max_chunk_size: Optional[int] = None,
) -> list[dict[str, Any]]:
    """
    Shape a JSON payload into size-bounded fragments.

    Limits that are omitted or not positive use the server defaults.

    Args:
        payload: Any JSON value
        message: Optional message prefixed to the first fragment
        max_response_size: Size above which the payload is chunked
        max_array_items: Maximum kept elements per array
        max_object_depth: Maximum kept nesting depth
        max_chunk_size: Budget per chunk

    Returns:
        Ordered response fragments
    """
    handler = FormatPayloadHandler(
        {
            "max_response_size": max_response_size,
            "max_array_items": max_array_items,
            "max_object_depth": max_object_depth,
            "max_chunk_size": max_chunk_size,
        }
    )
    fragments = await handler.execute({"payload": payload, "message": message})
    logger.debug(f"format_payload returned {len(fragments)} fragment(s)")
    return _to_wire(fragments)


@shaping_server.tool()
def describe_continuation_token(token: str) -> dict[str, Any]:
    """
    Decode the continuation token of a chunked response.

    Args:
        token: Token from the last fragment of a chunked response

    Returns:
        Descriptor with "kind" and either "total" or "keys"

    Raises:
        ToolError: If the token is malformed
    """
    descriptor = decode_continuation_token(token)
    if descriptor is None:
        raise ToolError("Invalid continuation token")
    return descriptor
