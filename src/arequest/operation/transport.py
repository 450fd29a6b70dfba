r"""Operation performing one HTTP round trip.

The transport operation sends its request, reads the whole response body
into an in-memory accumulation buffer, and hands the bytes to its
completion. It does not look at the status code or the content type;
that is the job of ``HttpOperation``.
"""

from __future__ import annotations

__all__ = ["TransportOperation"]

import logging
from typing import TYPE_CHECKING

import httpx

from arequest.core.config import DEFAULT_TIMEOUT
from arequest.exceptions import OperationCancelledError, OperationRejectedError
from arequest.operation.base import BaseOperation
from arequest.operation.state import OperationState

if TYPE_CHECKING:
    from arequest.operation.completion import Completion

logger: logging.Logger = logging.getLogger(__name__)


class TransportOperation(BaseOperation):
    r"""Operation sending one HTTP request and buffering its response.

    The request body, when present, is written by httpx, which also sets
    the ``Content-Length`` header. The response body is read chunk by
    chunk until the end of the stream. Errors raised while sending or
    reading are recorded and re-raised to the worker; the completion is
    only ever called from ``complete``.

    Args:
        request: The request to send.
        completion: Optional completion receiving the raw response bytes.
        client: Optional ``httpx.Client`` used to send the request. If
            ``None``, a client with the default timeout is created for the
            round trip and closed afterwards.

    Example:
        ```pycon
        >>> import httpx
        >>> from arequest.operation import TransportOperation
        >>> op = TransportOperation(httpx.Request("GET", "https://httpbin.org/get"))
        >>> op.state
        <OperationState.CREATED: 'created'>
        >>> op.method
        'GET'

        ```
    """

    def __init__(
        self,
        request: httpx.Request,
        completion: Completion | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__()
        self._request = request
        self._client = client
        self._completion = completion
        self._response: httpx.Response | None = None
        self._buffer: bytearray | None = bytearray()

    @property
    def request(self) -> httpx.Request:
        """The request sent by this operation."""
        return self._request

    @property
    def method(self) -> str:
        """The HTTP method of the request."""
        return self._request.method

    @property
    def url(self) -> str:
        """The URL of the request."""
        return str(self._request.url)

    @property
    def completion(self) -> Completion | None:
        """The completion notified when the operation completes."""
        return self._completion

    @completion.setter
    def completion(self, completion: Completion | None) -> None:
        self._completion = completion

    @property
    def response(self) -> httpx.Response | None:
        """The response, once its status line and headers were received."""
        return self._response

    @property
    def status_code(self) -> int | None:
        """The HTTP status code of the response, if received."""
        return None if self._response is None else self._response.status_code

    @property
    def content_type(self) -> str | None:
        """The ``Content-Type`` header of the response, if any."""
        return None if self._response is None else self._response.headers.get("content-type")

    @property
    def content(self) -> bytes:
        """The bytes accumulated so far, empty once released."""
        return b"" if self._buffer is None else bytes(self._buffer)

    def execute(self) -> None:
        """Send the request and read the whole response body.

        Raises:
            httpx.HTTPError: If sending the request or reading the response
                fails.
        """
        logger.debug(f"{self.method} request to {self.url} started")
        try:
            if self._client is None:
                with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
                    self._round_trip(client)
            else:
                self._round_trip(self._client)
        except httpx.HTTPError as exc:
            logger.debug(
                f"{self.method} request to {self.url} encountered {type(exc).__name__}: {exc}"
            )
            raise
        logger.debug(
            f"{self.method} request to {self.url} received status {self.status_code} "
            f"({len(self._buffer or b'')} bytes)"
        )

    def _round_trip(self, client: httpx.Client) -> None:
        """Send the request through ``client`` and accumulate the body.

        Args:
            client: The client used to send the request.
        """
        response = client.send(self._request, stream=True)
        self._response = response
        try:
            for chunk in response.iter_bytes():
                self._buffer.extend(chunk)
        finally:
            response.close()

    def _deliver(self) -> None:
        """Dispatch to the completion according to the final state, then
        release the accumulation buffer."""
        try:
            if self.state == OperationState.FINISHED:
                self._handle_success(bytes(self._buffer))
            else:
                self._handle_failure(self._failure_error())
        finally:
            self._buffer = None

    def _failure_error(self) -> Exception:
        """Build the exception reported for a rejected or cancelled
        operation.

        Returns:
            The exception to pass to the ``failure`` callback.
        """
        if self.state == OperationState.REJECTED:
            return OperationRejectedError(
                method=self.method,
                url=self.url,
                message=f"{self.method} request to {self.url} rejected from operation queue",
            )
        if self.state == OperationState.CANCELLED:
            cause = self.error
            reason = f": {cause}" if cause is not None else ""
            error = OperationCancelledError(
                method=self.method,
                url=self.url,
                message=f"{self.method} request to {self.url} cancelled{reason}",
                status_code=self.status_code,
                response=self._response,
                cause=cause,
            )
            error.__cause__ = cause
            return error
        msg = f"operation {self.operation_id} completed in state {self.state.value}"
        return RuntimeError(msg)

    def _handle_success(self, content: bytes) -> None:
        """Forward the accumulated bytes to the completion.

        Args:
            content: The response body.
        """
        if self._completion is not None:
            self._completion.success(self._request, content)

    def _handle_failure(self, error: Exception) -> None:
        """Forward a failure to the completion.

        Args:
            error: The exception describing the failure.
        """
        if self._completion is not None:
            self._completion.failure(self._request, error)
