"""Exceptions raised by distext."""

__all__ = ["ValidationError"]


class ValidationError(ValueError):
    """Raised when a distribution or solver receives malformed parameters.

    Subclasses :class:`ValueError` so callers catching the builtin keep
    working. Raised before any state is built, so construction either
    succeeds completely or not at all.
    """
