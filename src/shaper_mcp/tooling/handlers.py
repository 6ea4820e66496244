"""Base class for tools that return shaped responses."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from loguru import logger

from ..config import FormattingOptions
from ..formatter import Fragment, OptionsLike, create_success_response, format_error
from ..pagination import PaginationParams, paginate

ToolHandlerFn = Callable[[dict[str, Any]], Awaitable[list[Fragment]]]


class ToolHandler(ABC):
    """
    Base class for tool handlers.

    Subclasses implement execute() and use the format_* helpers so every
    result leaves the tool as an ordered list of fragments, with failures
    reported as a single error fragment instead of an exception.
    """

    def __init__(self, options: OptionsLike = None) -> None:
        self.options = FormattingOptions.resolve(options)

    @abstractmethod
    async def execute(self, args: dict[str, Any]) -> list[Fragment]:
        """
        Validate arguments and run the tool.

        Args:
            args: Arguments passed to the tool

        Returns:
            Ordered fragments
        """

    def format_success(self, data: Any, message: Optional[str] = None) -> list[Fragment]:
        """Format a successful result with the handler's limits."""
        return create_success_response(data, message, self.options)

    def format_error(self, error: Union[BaseException, str]) -> list[Fragment]:
        """Format an error as a one-fragment result."""
        return [format_error(error)]

    async def handle_execution(
        self, handler: ToolHandlerFn, args: dict[str, Any]
    ) -> list[Fragment]:
        """
        Run handler, converting raised errors into an error fragment.

        Args:
            handler: Coroutine function producing fragments
            args: Arguments passed to handler

        Returns:
            Handler fragments, or a single error fragment
        """
        try:
            return await handler(args)
        except ValueError as e:
            logger.warning(f"{type(self).__name__} rejected input: {e}")
            return self.format_error(e)
        except Exception as e:
            logger.error(f"{type(self).__name__} failed: {e}")
            message = str(e) or "Unknown error occurred"
            return self.format_error(f"Error executing tool: {message}")

    @staticmethod
    def get_pagination_params(args: dict[str, Any]) -> PaginationParams:
        """Extract standardized pagination parameters from tool arguments."""
        return PaginationParams.from_args(args)

    def format_paginated_success(
        self,
        items: Sequence[Any],
        params: Optional[PaginationParams] = None,
        message: Optional[str] = None,
    ) -> list[Fragment]:
        """
        Paginate items and format the window with a summary line.

        Args:
            items: Full list of items
            params: Requested window
            message: Optional heading placed above the summary line

        Returns:
            Fragments for {"data": [...], "pagination": {...}}
        """
        paginated = paginate(items, params)
        info = (
            f"Showing {len(paginated.windowed_items)} of "
            f"{paginated.window.total} total items"
        )
        full_message = f"{message}\n{info}" if message else info
        return self.format_success(paginated.to_dict(), full_message)
