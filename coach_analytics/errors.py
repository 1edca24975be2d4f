"""Error types raised by the analytics engine."""
from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when an input snapshot is structurally invalid.

    Covers malformed dates, negative quantities and required fields that are
    missing. Absent optional data (adherence ratings, macros) is not an error.
    """
