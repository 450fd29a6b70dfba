r"""HTTP client dispatching operations on its own queue.

``HttpClient`` turns a method, a path relative to its base URL and a set
of parameters into an ``httpx.Request``, wraps it into an operation built
by its operation factory, and enqueues the operation on the client's
``OperationQueue``. The completion of the operation is called on the
queue's worker thread.
"""

from __future__ import annotations

__all__ = ["HttpClient", "default_user_agent"]

import base64
import logging
import platform
from typing import TYPE_CHECKING, Any

import httpx

from arequest.core.config import ClientConfig
from arequest.core.validation import validate_base_url
from arequest.encoding import query_string_from_parameters, query_string_pairs
from arequest.operation.http import HttpOperation
from arequest.operation.queue import OperationQueue

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType
    from typing import Self

    from arequest.encoding import ParameterEncoding
    from arequest.operation.base import BaseOperation
    from arequest.operation.completion import Completion

    OperationFactory = Callable[..., HttpOperation]

logger: logging.Logger = logging.getLogger(__name__)

# Methods whose parameters are sent in the query string
QUERY_STRING_METHODS = frozenset({"GET", "HEAD", "DELETE"})

# Methods whose parameters are sent in the request body
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def default_user_agent() -> str:
    """Build the default ``User-Agent`` header value.

    Returns:
        A string such as ``arequest/0.1.0 (Linux 6.1.0) Python/3.12.1``.
    """
    from arequest import __version__

    return (
        f"arequest/{__version__} ({platform.system()} {platform.release()}) "
        f"Python/{platform.python_version()}"
    )


class HttpClient:
    r"""Client building requests relative to a base URL and running them
    asynchronously.

    Each client owns one ``OperationQueue``: the operations it enqueues run
    one at a time, in order, on the queue's worker thread. Two clients run
    their operations in parallel.

    Args:
        base_url: The URL request paths are relative to. A trailing ``/``
            is added if missing.
        config: Optional ``ClientConfig``. If ``None``, a default
            ``ClientConfig`` is used.
        client: Optional ``httpx.Client`` used to send requests. If
            ``None``, a client is created from ``config`` and closed by
            ``close``.
        operation_factory: Callable building the operation of a request,
            called as ``factory(request, completion, client=client)``.
            Defaults to ``HttpOperation``; pass ``JsonRequestOperation``,
            ``XmlRequestOperation`` or ``ImageRequestOperation`` to decode
            responses.

    Raises:
        ValueError: If ``base_url`` is empty.

    Example:
        ```pycon
        >>> from arequest import CallbackCompletion, HttpClient, JsonRequestOperation
        >>> with HttpClient(
        ...     "https://httpbin.org", operation_factory=JsonRequestOperation
        ... ) as client:  # doctest: +SKIP
        ...     client.get(
        ...         "get",
        ...         {"q": "python"},
        ...         CallbackCompletion(on_success=lambda request, document: print(document["args"])),
        ...     )
        ...
        {'q': 'python'}

        ```
    """

    def __init__(
        self,
        base_url: str,
        *,
        config: ClientConfig | None = None,
        client: httpx.Client | None = None,
        operation_factory: OperationFactory | None = None,
    ) -> None:
        self._base_url = validate_base_url(base_url)
        self._config: ClientConfig = config or ClientConfig()
        self._close_client = client is None
        self._client: httpx.Client = client or httpx.Client(
            timeout=self._config.timeout, follow_redirects=self._config.follow_redirects
        )
        self._operation_factory: OperationFactory = operation_factory or HttpOperation
        self._queue = OperationQueue(
            maxsize=self._config.max_queue_size, name=f"http-client-{id(self):x}"
        )
        self._default_headers: dict[str, str] = {
            "User-Agent": self._config.user_agent or default_user_agent()
        }
        self.parameter_encoding: ParameterEncoding = self._config.parameter_encoding

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_url={self._base_url!r})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Wait for the queued operations, then close the client.

        Args:
            exc_type: Exception type if an exception occurred.
            exc_val: Exception value if an exception occurred.
            exc_tb: Exception traceback if an exception occurred.
        """
        self.close()

    @property
    def base_url(self) -> str:
        """The URL request paths are relative to, ending with ``/``."""
        return self._base_url

    @property
    def config(self) -> ClientConfig:
        """The configuration of the client."""
        return self._config

    @property
    def operation_queue(self) -> OperationQueue:
        """The queue running the operations of this client."""
        return self._queue

    @property
    def default_headers(self) -> dict[str, str]:
        """A copy of the headers added to every request."""
        return dict(self._default_headers)

    def default_header(self, name: str) -> str | None:
        """Return the value of a default header.

        Args:
            name: The header name, matched case-insensitively.

        Returns:
            The header value, or ``None`` if the header is not set.
        """
        for key, value in self._default_headers.items():
            if key.lower() == name.lower():
                return value
        return None

    def set_default_header(self, name: str, value: str | None) -> None:
        """Set or remove a header added to every request.

        Args:
            name: The header name, matched case-insensitively.
            value: The header value, or ``None`` to remove the header.
        """
        for key in [key for key in self._default_headers if key.lower() == name.lower()]:
            del self._default_headers[key]
        if value is not None:
            self._default_headers[name] = value

    def set_authorization_header(self, username: str, password: str) -> None:
        """Send HTTP Basic credentials with every request.

        Args:
            username: The user name.
            password: The password.

        Example:
            ```pycon
            >>> from arequest import HttpClient
            >>> client = HttpClient("https://httpbin.org")
            >>> client.set_authorization_header("username", "12345678")
            >>> client.default_header("Authorization")
            'Basic dXNlcm5hbWU6MTIzNDU2Nzg='
            >>> client.close()

            ```
        """
        credentials = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        self.set_default_header("Authorization", f"Basic {credentials}")

    def clear_authorization_header(self) -> None:
        """Stop sending an ``Authorization`` header."""
        self.set_default_header("Authorization", None)

    def build_request(
        self,
        method: str,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        *,
        files: Mapping[str, Any] | None = None,
    ) -> httpx.Request:
        r"""Build a request relative to the base URL.

        For ``GET``, ``HEAD`` and ``DELETE`` the parameters are appended
        to the query string. For ``POST``, ``PUT`` and ``PATCH`` they are
        encoded in the body with the client's parameter encoding, or sent
        as multipart form fields when ``files`` is given.

        Args:
            method: The HTTP method.
            path: The path, relative to the base URL.
            parameters: Optional nested parameters.
            files: Optional files to upload as a multipart form, in the
                format accepted by ``httpx``.

        Returns:
            The request, carrying the default headers.

        Raises:
            ValueError: If ``files`` is given for a method without body.

        Example:
            ```pycon
            >>> from arequest import HttpClient
            >>> client = HttpClient("https://httpbin.org")
            >>> request = client.build_request("GET", "get", {"user": {"name": "Fritz"}})
            >>> str(request.url)
            'https://httpbin.org/get?user[name]=Fritz'
            >>> client.close()

            ```
        """
        method = method.upper()
        url = f"{self._base_url}{path.lstrip('/')}"
        headers = dict(self._default_headers)
        encoding = self._config.string_encoding

        if files is not None and method not in BODY_METHODS:
            msg = f"files can only be sent with {sorted(BODY_METHODS)}, got {method}"
            raise ValueError(msg)

        if parameters is not None and method not in BODY_METHODS:
            query = query_string_from_parameters(parameters, encoding)
            if query:
                url = f"{url}{'&' if '?' in url else '?'}{query}"
            return httpx.Request(method, url, headers=headers)

        if files is not None:
            data: dict[str, list[str]] = {}
            for field, value in query_string_pairs(parameters or {}):
                data.setdefault(field, []).append("" if value is None else value)
            return httpx.Request(method, url, headers=headers, data=data, files=files)

        if parameters is not None:
            body = self.parameter_encoding.encode(parameters, encoding)
            headers["Content-Type"] = f"{self.parameter_encoding.content_type}; charset={encoding}"
            return httpx.Request(method, url, headers=headers, content=body.encode(encoding))

        return httpx.Request(method, url, headers=headers)

    def operation_with_request(
        self,
        request: httpx.Request,
        completion: Completion | None = None,
        *,
        operation_factory: OperationFactory | None = None,
    ) -> HttpOperation:
        """Build the operation of a request without enqueueing it.

        Args:
            request: The request.
            completion: Optional completion of the operation.
            operation_factory: Optional factory overriding the client's.

        Returns:
            The operation, in ``CREATED`` state.
        """
        factory = operation_factory or self._operation_factory
        return factory(request, completion, client=self._client)

    def enqueue_operation(self, operation: BaseOperation) -> None:
        """Add an operation to the client's queue.

        Args:
            operation: The operation, in ``CREATED`` state.
        """
        self._queue.add_operation(operation)

    def request(
        self,
        method: str,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        completion: Completion | None = None,
        *,
        files: Mapping[str, Any] | None = None,
        operation_factory: OperationFactory | None = None,
    ) -> HttpOperation:
        """Build a request, wrap it into an operation and enqueue it.

        Args:
            method: The HTTP method.
            path: The path, relative to the base URL.
            parameters: Optional nested parameters.
            completion: Optional completion of the operation.
            files: Optional files to upload as a multipart form.
            operation_factory: Optional factory overriding the client's.

        Returns:
            The enqueued operation.
        """
        request = self.build_request(method, path, parameters, files=files)
        operation = self.operation_with_request(
            request, completion, operation_factory=operation_factory
        )
        logger.debug(f"Enqueueing {request.method} request to {request.url}")
        self.enqueue_operation(operation)
        return operation

    def get(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        completion: Completion | None = None,
        **kwargs: Any,
    ) -> HttpOperation:
        """Enqueue a ``GET`` request (see ``request``)."""
        return self.request("GET", path, parameters, completion, **kwargs)

    def head(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        completion: Completion | None = None,
        **kwargs: Any,
    ) -> HttpOperation:
        """Enqueue a ``HEAD`` request (see ``request``)."""
        return self.request("HEAD", path, parameters, completion, **kwargs)

    def delete(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        completion: Completion | None = None,
        **kwargs: Any,
    ) -> HttpOperation:
        """Enqueue a ``DELETE`` request (see ``request``)."""
        return self.request("DELETE", path, parameters, completion, **kwargs)

    def post(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        completion: Completion | None = None,
        **kwargs: Any,
    ) -> HttpOperation:
        """Enqueue a ``POST`` request (see ``request``)."""
        return self.request("POST", path, parameters, completion, **kwargs)

    def put(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        completion: Completion | None = None,
        **kwargs: Any,
    ) -> HttpOperation:
        """Enqueue a ``PUT`` request (see ``request``)."""
        return self.request("PUT", path, parameters, completion, **kwargs)

    def patch(
        self,
        path: str,
        parameters: Mapping[str, Any] | None = None,
        completion: Completion | None = None,
        **kwargs: Any,
    ) -> HttpOperation:
        """Enqueue a ``PATCH`` request (see ``request``)."""
        return self.request("PATCH", path, parameters, completion, **kwargs)

    def cancel_all_operations(self) -> list[BaseOperation]:
        """Discard the operations waiting in the client's queue.

        Returns:
            The discarded operations.
        """
        return self._queue.cancel_all_operations()

    def join(self, timeout: float | None = None) -> bool:
        """Wait until every enqueued operation completed.

        Args:
            timeout: Maximum number of seconds to wait.

        Returns:
            ``True`` if the queue is idle, ``False`` if the timeout elapsed.
        """
        return self._queue.join(timeout)

    def close(self, timeout: float | None = None) -> None:
        """Wait for the queued operations, then close the ``httpx.Client``
        if this client created it.

        Args:
            timeout: Maximum number of seconds to wait for the queue.
        """
        if not self._queue.join(timeout):
            logger.warning(f"{self!r} closed while operations are still running")
        if self._close_client:
            self._client.close()
            self._close_client = False
