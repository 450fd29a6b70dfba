r"""Utility functions shared across the package."""

from __future__ import annotations

__all__ = ["StructuredFormatter", "current_operation_id", "operation_context"]

from arequest.utils.structured_logging import (
    StructuredFormatter,
    current_operation_id,
    operation_context,
)
