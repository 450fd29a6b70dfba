r"""Configuration dataclass and defaults for HttpClient.

The defaults below are used by ``HttpClient`` and by operations that
create their own ``httpx.Client``.
"""

from __future__ import annotations

__all__ = [
    "ClientConfig",
    "DEFAULT_ENCODING",
    "DEFAULT_MAX_QUEUE_SIZE",
    "DEFAULT_TIMEOUT",
]

from dataclasses import dataclass, replace
from typing import Any

from arequest.core.validation import (
    validate_encoding,
    validate_max_queue_size,
    validate_timeout,
)
from arequest.encoding import ParameterEncoding

# Timeout in seconds of the httpx clients created by the package
DEFAULT_TIMEOUT = 10.0

# Default capacity of the operation queue, 0 means unbounded
DEFAULT_MAX_QUEUE_SIZE = 0

# Character encoding of query strings and request bodies
DEFAULT_ENCODING = "utf-8"


@dataclass
class ClientConfig:
    """Configuration for HttpClient behavior.

    Args:
        timeout: Timeout in seconds of the httpx client created by
            ``HttpClient``. Must be > 0.
        max_queue_size: Capacity of the client's operation queue. Operations
            enqueued while it is full are rejected. ``0`` means unbounded.
        parameter_encoding: How POST/PUT/PATCH parameters are encoded in
            the request body.
        string_encoding: Character encoding of encoded parameters.
        follow_redirects: Whether the httpx client created by ``HttpClient``
            follows redirects.
        user_agent: Optional ``User-Agent`` header. If ``None``, a default
            naming the package, platform and Python version is used.

    Example:
        ```pycon
        >>> from arequest.core.config import ClientConfig
        >>> config = ClientConfig()  # Use defaults
        >>> config.timeout
        10.0
        >>> config = ClientConfig(max_queue_size=5)
        >>> merged = config.merge(max_queue_size=10)  # Override specific parameters
        >>> merged.max_queue_size
        10
        >>> config.max_queue_size  # Original unchanged
        5

        ```
    """

    timeout: float = DEFAULT_TIMEOUT
    max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE
    parameter_encoding: ParameterEncoding = ParameterEncoding.FORM
    string_encoding: str = DEFAULT_ENCODING
    follow_redirects: bool = False
    user_agent: str | None = None

    def __post_init__(self) -> None:
        """Check the timeout, the queue capacity and the string encoding.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_timeout(self.timeout)
        validate_max_queue_size(self.max_queue_size)
        validate_encoding(self.string_encoding)

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from arequest.core.config import ClientConfig
            >>> config = ClientConfig(timeout=5.0)
            >>> config.merge(timeout=30.0).timeout
            30.0
            >>> config.merge(timeout=None).timeout
            5.0

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as a plain dictionary.

        Returns:
            Dictionary with the configuration parameters.
        """
        return {
            "timeout": self.timeout,
            "max_queue_size": self.max_queue_size,
            "parameter_encoding": self.parameter_encoding,
            "string_encoding": self.string_encoding,
            "follow_redirects": self.follow_redirects,
            "user_agent": self.user_agent,
        }
