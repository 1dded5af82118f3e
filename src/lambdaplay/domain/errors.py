"""Domain exceptions and the error codes reported for them.

Services catch the exceptions at the boundary and convert them into a
``ServiceResult`` carrying the matching :class:`ErrorCode`.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Codes that appear in ``ServiceResult.error.code``."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    REDUCTION_FAILED = "REDUCTION_FAILED"


class ValidationError(ValueError):
    """A named expression failed validation (empty name or body)."""


class ReductionError(Exception):
    """The reduction oracle could not process an expression."""
