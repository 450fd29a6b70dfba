r"""Exceptions delivered to completion callbacks.

Every terminal failure of an operation is reported through the
``failure`` callback of its completion as one of the exceptions defined
here. None of them is retried internally.
"""

from __future__ import annotations

__all__ = [
    "HttpRequestError",
    "OperationCancelledError",
    "OperationRejectedError",
    "ResponseDecodeError",
    "ResponseValidationError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class HttpRequestError(RuntimeError):
    """Base exception for a failed HTTP operation.

    Args:
        method: The HTTP method of the request (e.g. ``"GET"``).
        url: The URL of the request.
        message: A descriptive error message.
        status_code: The HTTP status code of the response, if any.
        response: The HTTP response object, if any.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from arequest.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET", url="https://api.example.com", message="request failed"
        ... )
        >>> error.method
        'GET'
        >>> str(error)
        'request failed'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.status_code = status_code
        self.response = response
        self.cause = cause


class OperationRejectedError(HttpRequestError):
    """Raised when an operation queue refuses an operation.

    The operation never ran.
    """


class OperationCancelledError(HttpRequestError):
    """Raised when an operation failed while executing.

    The original exception (connection error, timeout, ...) is available
    as ``cause``.
    """


class ResponseValidationError(HttpRequestError):
    """Raised when a response violates the status code or content type
    contract of its operation.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: A message naming the expected and the observed values.
        status_code: The observed HTTP status code.
        content_type: The observed ``Content-Type`` header value, if any.
        response: The HTTP response object, if any.
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        content_type: str | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(
            method=method,
            url=url,
            message=message,
            status_code=status_code,
            response=response,
        )
        self.content_type = content_type


class ResponseDecodeError(HttpRequestError):
    """Raised when a validated response body cannot be decoded.

    The parser exception is available as ``cause``.
    """
