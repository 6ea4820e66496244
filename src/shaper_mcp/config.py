"""Centralized configuration for the response shaping layer."""

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    return int(os.getenv(name, str(default)))


class Config:
    """
    Shaper configuration with environment variable overrides.

    All configuration values are centralized here with sensible defaults.
    Values can be overridden via environment variables.
    """

    @staticmethod
    def _parse_port(port_str: str) -> int:
        """Parse and validate port number from string."""
        try:
            port = int(port_str)
            if not (1 <= port <= 65535):
                raise ValueError(f"Port must be 1-65535, got {port}")
            return port
        except ValueError as e:
            raise ValueError(f"Invalid PORT environment variable: {e}")

    # ========================================================================
    # Server Configuration
    # ========================================================================
    SERVER_MODE: str = os.getenv("SERVER_MODE", "stdio").lower()
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _parse_port.__func__(os.getenv("PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None

    # ========================================================================
    # Response Limits
    # ========================================================================
    MAX_RESPONSE_SIZE: int = _env_int("MAX_RESPONSE_SIZE", 1_000_000)
    MAX_ARRAY_ITEMS: int = _env_int("MAX_ARRAY_ITEMS", 50)
    MAX_OBJECT_DEPTH: int = _env_int("MAX_OBJECT_DEPTH", 5)
    MAX_CHUNK_SIZE: int = _env_int("MAX_CHUNK_SIZE", 500_000)

    # Hard ceiling on truncation depth, independent of MAX_OBJECT_DEPTH
    MAX_TRAVERSAL_DEPTH: int = _env_int("MAX_TRAVERSAL_DEPTH", 256)

    # ========================================================================
    # Pagination
    # ========================================================================
    DEFAULT_PAGE_LIMIT: int = _env_int("DEFAULT_PAGE_LIMIT", 10)

    @classmethod
    def validate(cls) -> bool:
        """
        Validate configuration consistency.

        Checks:
        - SERVER_MODE is a supported transport
        - All limits are > 0

        Returns:
            True if validation passes

        Raises:
            ValueError: If validation fails
        """
        errors = []

        if cls.SERVER_MODE not in ("stdio", "sse", "http"):
            errors.append(
                f"SERVER_MODE must be one of stdio, sse, http, got {cls.SERVER_MODE!r}"
            )

        for name in (
            "MAX_RESPONSE_SIZE",
            "MAX_ARRAY_ITEMS",
            "MAX_OBJECT_DEPTH",
            "MAX_CHUNK_SIZE",
            "MAX_TRAVERSAL_DEPTH",
            "DEFAULT_PAGE_LIMIT",
        ):
            value = getattr(cls, name)
            if value <= 0:
                errors.append(f"{name} must be > 0, got {value}")

        if cls.MAX_CHUNK_SIZE > cls.MAX_RESPONSE_SIZE:
            import warnings

            warnings.warn(
                f"MAX_CHUNK_SIZE ({cls.MAX_CHUNK_SIZE}) is larger than "
                f"MAX_RESPONSE_SIZE ({cls.MAX_RESPONSE_SIZE}); "
                "chunked responses will rarely split."
            )

        if errors:
            raise ValueError(f"Config validation failed: {'; '.join(errors)}")

        return True


# camelCase aliases accepted from tool arguments
_CAMEL_ALIASES = {
    "maxResponseSize": "max_response_size",
    "maxArrayItems": "max_array_items",
    "maxObjectDepth": "max_object_depth",
    "maxChunkSize": "max_chunk_size",
}


@dataclass(frozen=True)
class FormattingOptions:
    """
    Limits applied to a single formatting call.

    Instances are immutable; every call resolves its own record via
    ``FormattingOptions.resolve`` and never changes it mid-traversal.
    """

    max_response_size: int = 1_000_000
    max_array_items: int = 50
    max_object_depth: int = 5
    max_chunk_size: int = 500_000

    @classmethod
    def from_config(cls) -> "FormattingOptions":
        """Build the default limits from the process configuration."""
        return cls(
            max_response_size=positive_or(Config.MAX_RESPONSE_SIZE, cls.max_response_size),
            max_array_items=positive_or(Config.MAX_ARRAY_ITEMS, cls.max_array_items),
            max_object_depth=positive_or(Config.MAX_OBJECT_DEPTH, cls.max_object_depth),
            max_chunk_size=positive_or(Config.MAX_CHUNK_SIZE, cls.max_chunk_size),
        )

    @classmethod
    def resolve(
        cls, options: Union["FormattingOptions", Mapping[str, Any], None] = None
    ) -> "FormattingOptions":
        """
        Resolve caller-supplied options against the configured defaults.

        Missing, non-integer and non-positive values fall back to the
        default for that field. A limit is never disabled.

        Args:
            options: None, a FormattingOptions, or a mapping using either
                snake_case or camelCase field names

        Returns:
            Fully populated FormattingOptions
        """
        defaults = cls.from_config()
        if options is None:
            return defaults

        if isinstance(options, FormattingOptions):
            raw = {f.name: getattr(options, f.name) for f in fields(cls)}
        else:
            raw = {}
            for key, value in options.items():
                name = _CAMEL_ALIASES.get(key, key)
                if name in cls.__dataclass_fields__:
                    raw[name] = value

        resolved = {
            f.name: positive_or(raw.get(f.name), getattr(defaults, f.name))
            for f in fields(cls)
        }
        return cls(**resolved)


def positive_or(value: Any, default: int) -> int:
    """Return value as a positive int, or default when unusable."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number > 0 else default


DEFAULT_LIMITS = FormattingOptions()
