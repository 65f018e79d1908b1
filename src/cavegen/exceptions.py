"""Custom exceptions for level generation."""


class CavegenError(Exception):
    """Base exception for generation errors."""

    pass


class InvalidGridError(CavegenError, ValueError):
    """Raised when a supplied tile grid is empty or not rectangular."""

    pass
