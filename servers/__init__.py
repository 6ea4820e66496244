"""Server tools package - response shaping tools."""

from .shaping_tools import shaping_server

__all__ = ["shaping_server"]
