r"""HTTP operation delivering a parsed JSON document."""

from __future__ import annotations

__all__ = ["JsonRequestOperation"]

import json
from typing import Any, ClassVar

from arequest.operation.http import HttpOperation


class JsonRequestOperation(HttpOperation):
    r"""HTTP operation for downloading JSON content.

    By default the response must have one of the following content types:
    ``application/json``, ``text/json`` or ``text/javascript``. The body
    is parsed with ``json.loads``; a body that is not valid JSON is
    reported as a ``ResponseDecodeError``.

    Example:
        ```pycon
        >>> import httpx
        >>> from arequest.operation import JsonRequestOperation
        >>> op = JsonRequestOperation(httpx.Request("GET", "https://httpbin.org/json"))
        >>> op.decode(b'{"a": 1}')
        {'a': 1}

        ```
    """

    DEFAULT_CONTENT_TYPES: ClassVar[tuple[str, ...]] = (
        "application/json",
        "text/json",
        "text/javascript",
    )

    def decode(self, content: bytes) -> Any:
        return json.loads(content)
