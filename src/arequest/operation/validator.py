r"""Status code and content type contract of HTTP operations."""

from __future__ import annotations

__all__ = ["DEFAULT_ACCEPTABLE_STATUS_CODES", "ResponseValidator"]

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from arequest.exceptions import ResponseValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Successful responses: 200 to 299 inclusive
DEFAULT_ACCEPTABLE_STATUS_CODES = frozenset(range(200, 300))


@dataclass(frozen=True)
class ResponseValidator:
    r"""Acceptable status codes and content types of a response.

    Args:
        status_codes: The acceptable HTTP status codes. Defaults to the
            successful range 200-299.
        content_types: The acceptable content types. A response is accepted
            if its ``Content-Type`` header contains one of them. An empty
            tuple accepts any content type.

    Raises:
        ValueError: If ``status_codes`` is empty.

    Example:
        ```pycon
        >>> from arequest.operation import ResponseValidator
        >>> validator = ResponseValidator(content_types=("application/json",))
        >>> validator.validate(200, "application/json; charset=utf-8") is None
        True
        >>> print(validator.validate(404, "application/json"))
        Expected response code in range [200, 299], got 404
        >>> print(validator.validate(200, "text/plain"))
        Expected content types ['application/json'], got text/plain

        ```
    """

    status_codes: frozenset[int] = field(default=DEFAULT_ACCEPTABLE_STATUS_CODES)
    content_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Normalize iterables passed by callers into immutable containers
        object.__setattr__(self, "status_codes", frozenset(self.status_codes))
        object.__setattr__(self, "content_types", tuple(self.content_types))
        if not self.status_codes:
            msg = "status_codes must not be empty"
            raise ValueError(msg)

    def with_content_types(self, content_types: Iterable[str]) -> ResponseValidator:
        """Return a copy accepting the given content types.

        Args:
            content_types: The acceptable content types.

        Returns:
            A new validator with the same status codes.
        """
        return ResponseValidator(status_codes=self.status_codes, content_types=tuple(content_types))

    def has_acceptable_status_code(self, status_code: int | None) -> bool:
        """Indicate whether ``status_code`` is acceptable.

        Args:
            status_code: The HTTP status code of the response.

        Returns:
            ``True`` if the status code is in the acceptable set.
        """
        return status_code in self.status_codes

    def has_acceptable_content_type(self, content_type: str | None) -> bool:
        """Indicate whether ``content_type`` is acceptable.

        A response without a content type is accepted.

        Args:
            content_type: The ``Content-Type`` header of the response.

        Returns:
            ``True`` if no content type is required, if the response has no
            content type, or if it contains one of the acceptable values.
        """
        if not self.content_types or content_type is None:
            return True
        return any(accepted in content_type for accepted in self.content_types)

    def validate(
        self,
        status_code: int | None,
        content_type: str | None,
        *,
        method: str = "",
        url: str = "",
    ) -> ResponseValidationError | None:
        """Check a response against the contract.

        The status code is checked first; the content type is only
        checked when the status code is acceptable.

        Args:
            status_code: The HTTP status code of the response.
            content_type: The ``Content-Type`` header of the response.
            method: The HTTP method of the request, for the error.
            url: The URL of the request, for the error.

        Returns:
            A ``ResponseValidationError`` naming the expected and observed
            values, or ``None`` if the response is acceptable.
        """
        if not self.has_acceptable_status_code(status_code):
            message = (
                f"Expected response code in range [{min(self.status_codes)}, "
                f"{max(self.status_codes)}], got {status_code}"
            )
        elif not self.has_acceptable_content_type(content_type):
            message = f"Expected content types {list(self.content_types)}, got {content_type}"
        else:
            return None
        return ResponseValidationError(
            method=method,
            url=url,
            message=message,
            status_code=status_code,
            content_type=content_type,
        )
