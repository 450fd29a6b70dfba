r"""Completion interface of operations.

A completion receives exactly one terminal call per operation: either
``success(request, result)`` or ``failure(request, error)``. The type of
``result`` depends on the operation: raw bytes for a transport or plain
HTTP operation, a parsed document for the decoding operations.

Example:
    ```pycon
    >>> import httpx
    >>> from arequest.operation import CallbackCompletion
    >>> completion = CallbackCompletion(
    ...     on_success=lambda request, result: print(f"got {result!r}"),
    ...     on_failure=lambda request, error: print(f"failed: {error}"),
    ... )
    >>> completion.success(httpx.Request("GET", "https://api.example.com"), b"ok")
    got b'ok'

    ```
"""

from __future__ import annotations

__all__ = ["CallbackCompletion", "Completion"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx


@runtime_checkable
class Completion(Protocol):
    """Two-case callback contract of an operation."""

    def failure(self, request: httpx.Request, error: Exception) -> None:
        """Called when the operation failed.

        Args:
            request: The request of the operation.
            error: The exception describing the failure.
        """

    def success(self, request: httpx.Request, result: Any) -> None:
        """Called when the operation succeeded.

        Args:
            request: The request of the operation.
            result: The response content, decoded by the operation.
        """


@dataclass
class CallbackCompletion:
    """Completion built from two plain callables.

    Attributes:
        on_success: Called with ``(request, result)`` on success.
        on_failure: Called with ``(request, error)`` on failure.
    """

    on_success: Callable[[httpx.Request, Any], None] | None = None
    on_failure: Callable[[httpx.Request, Exception], None] | None = None

    def failure(self, request: httpx.Request, error: Exception) -> None:
        if self.on_failure is not None:
            self.on_failure(request, error)

    def success(self, request: httpx.Request, result: Any) -> None:
        if self.on_success is not None:
            self.on_success(request, result)
