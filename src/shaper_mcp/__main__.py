"""
Entry point for running shaper_mcp as a module.

Allows running the shaping server via:
    python -m shaper_mcp
    uv run python -m shaper_mcp
"""

from shaper_mcp.server import main

if __name__ == "__main__":
    main()
