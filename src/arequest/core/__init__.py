r"""Configuration and parameter validation shared by the client and the
operations."""

from __future__ import annotations

__all__ = [
    "DEFAULT_ENCODING",
    "DEFAULT_MAX_QUEUE_SIZE",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "validate_base_url",
    "validate_encoding",
    "validate_max_queue_size",
    "validate_timeout",
]

from arequest.core.config import (
    DEFAULT_ENCODING,
    DEFAULT_MAX_QUEUE_SIZE,
    DEFAULT_TIMEOUT,
    ClientConfig,
)
from arequest.core.validation import (
    validate_base_url,
    validate_encoding,
    validate_max_queue_size,
    validate_timeout,
)
