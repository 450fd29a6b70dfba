r"""HTTP operation validating the response before delivering it.

``HttpOperation`` wraps the completion of a transport operation with a
validating completion: a transport success is only forwarded as a
success if the response status code and content type satisfy the
operation's ``ResponseValidator``. Subclasses override ``decode`` to turn
the validated bytes into a typed value.
"""

from __future__ import annotations

__all__ = ["HttpOperation", "ValidatingCompletion"]

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from arequest.exceptions import ResponseDecodeError
from arequest.operation.state import OperationState
from arequest.operation.transport import TransportOperation
from arequest.operation.validator import ResponseValidator

if TYPE_CHECKING:
    import httpx

    from arequest.exceptions import ResponseValidationError
    from arequest.operation.completion import Completion

logger: logging.Logger = logging.getLogger(__name__)


class ValidatingCompletion:
    """Completion validating and decoding a transport result before
    forwarding it.

    Args:
        operation: The operation whose response is validated.
        completion: The completion receiving the validated result.
    """

    def __init__(self, operation: HttpOperation, completion: Completion) -> None:
        self._operation = operation
        self._completion = completion

    def failure(self, request: httpx.Request, error: Exception) -> None:
        self._completion.failure(request, error)

    def success(self, request: httpx.Request, result: bytes) -> None:
        error = self._operation.validate()
        if error is not None:
            logger.debug(f"Operation {self._operation.operation_id} failed validation: {error}")
            self._completion.failure(request, error)
            return
        try:
            value = self._operation.decode(result)
        except Exception as exc:
            logger.debug(f"Operation {self._operation.operation_id} failed decoding: {exc}")
            decode_error = ResponseDecodeError(
                method=request.method,
                url=str(request.url),
                message=f"{request.method} request to {request.url} returned undecodable content: {exc}",
                status_code=self._operation.status_code,
                response=self._operation.response,
                cause=exc,
            )
            decode_error.__cause__ = exc
            self._completion.failure(request, decode_error)
            return
        self._completion.success(request, value)


class HttpOperation(TransportOperation):
    r"""Transport operation with status code and content type validation.

    Args:
        request: The request to send.
        completion: Optional completion receiving the validated result.
        client: Optional ``httpx.Client`` used to send the request.
        validator: Optional validator. If ``None``, responses must have a
            status code in 200-299 and a content type matching
            ``DEFAULT_CONTENT_TYPES``.

    Example:
        ```pycon
        >>> import httpx
        >>> from arequest.operation import HttpOperation
        >>> op = HttpOperation(httpx.Request("GET", "https://httpbin.org/status/404"))
        >>> min(op.acceptable_status_codes), max(op.acceptable_status_codes)
        (200, 299)
        >>> op.acceptable_content_types
        ()

        ```
    """

    DEFAULT_CONTENT_TYPES: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        request: httpx.Request,
        completion: Completion | None = None,
        *,
        client: httpx.Client | None = None,
        validator: ResponseValidator | None = None,
    ) -> None:
        super().__init__(request, client=client)
        self._validator = validator or ResponseValidator(content_types=self.DEFAULT_CONTENT_TYPES)
        self._http_completion: Completion | None = None
        self.completion = completion

    @property
    def completion(self) -> Completion | None:
        """The completion receiving the validated result."""
        return self._http_completion

    @completion.setter
    def completion(self, completion: Completion | None) -> None:
        self._http_completion = completion
        self._completion = None if completion is None else ValidatingCompletion(self, completion)

    @property
    def validator(self) -> ResponseValidator:
        """The response contract of this operation."""
        return self._validator

    @validator.setter
    def validator(self, validator: ResponseValidator) -> None:
        if self.state != OperationState.CREATED:
            msg = (
                f"cannot change the validator of operation {self.operation_id} "
                f"in state {self.state.value}"
            )
            raise RuntimeError(msg)
        self._validator = validator

    @property
    def acceptable_status_codes(self) -> frozenset[int]:
        """The acceptable HTTP status codes."""
        return self._validator.status_codes

    @property
    def acceptable_content_types(self) -> tuple[str, ...]:
        """The acceptable content types, empty if any is accepted."""
        return self._validator.content_types

    def validate(self) -> ResponseValidationError | None:
        """Check the received response against the validator.

        Returns:
            The validation error, or ``None`` if the response is acceptable.
        """
        error = self._validator.validate(
            self.status_code, self.content_type, method=self.method, url=self.url
        )
        if error is not None:
            error.response = self.response
        return error

    def decode(self, content: bytes) -> Any:
        """Turn the validated response body into the delivered value.

        Args:
            content: The response body.

        Returns:
            The body unchanged.
        """
        return content
