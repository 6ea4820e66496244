"""FastMCP server entry point for the shaping tools."""

import sys

from fastmcp import FastMCP
from loguru import logger

from servers.shaping_tools import shaping_server

from .config import Config

SERVER_NAME = "ShaperMCP"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>"
)


def configure_logging() -> None:
    """
    Configure loguru sinks.

    Logs go to stderr so the stdio transport keeps stdout for protocol
    messages. A rotating file sink is added when LOG_FILE is set.
    """
    logger.remove()  # Remove default handler

    logger.add(sys.stderr, format=LOG_FORMAT, level=Config.LOG_LEVEL)

    if Config.LOG_FILE:
        logger.add(
            Config.LOG_FILE,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            level="DEBUG",
        )


def build_server() -> FastMCP:
    """Return the FastMCP app serving the shaping tools."""
    return shaping_server


def main():
    """
    Main entry point for the server.

    Configures:
    - Loguru for structured logging
    - Transport from SERVER_MODE (stdio, sse or http)
    """
    configure_logging()

    try:
        Config.validate()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    mcp = build_server()
    logger.info(f"Starting {SERVER_NAME} in {Config.SERVER_MODE} mode...")

    try:
        if Config.SERVER_MODE == "stdio":
            mcp.run(transport="stdio")
        else:
            logger.info(
                f"{SERVER_NAME} listening on http://{Config.HOST}:{Config.PORT}"
            )
            mcp.run(transport=Config.SERVER_MODE, host=Config.HOST, port=Config.PORT)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
