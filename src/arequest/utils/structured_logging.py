r"""JSON log lines tagged with the id of the running operation.

Queue workers run every operation inside ``operation_context``, which
stores the operation id in a context variable. ``StructuredFormatter``
renders log records as JSON objects and adds that id, so the lines logged
while an operation executes or completes, including the lines logged by
user callbacks, can be grouped by operation.

Example:
    Send the package logs to stderr as JSON lines:

    ```python
    import logging
    from arequest.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.getLogger("arequest").addHandler(handler)
    logging.getLogger("arequest").setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = ["StructuredFormatter", "current_operation_id", "operation_context"]

import contextvars
import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_operation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "arequest_operation_id", default=None
)

# Attributes every LogRecord has, anything else came from ``extra``
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"asctime", "message"}


def current_operation_id() -> str | None:
    """Return the id of the operation running in the current context.

    Returns:
        The operation id, or ``None`` outside ``operation_context``.
    """
    return _operation_id.get()


@contextmanager
def operation_context(operation_id: str) -> Iterator[None]:
    r"""Tag the log records emitted inside the block with an operation id.

    Args:
        operation_id: The id of the operation.

    Example:
        ```pycon
        >>> from arequest.utils.structured_logging import (
        ...     current_operation_id,
        ...     operation_context,
        ... )
        >>> with operation_context("3f2a9c"):
        ...     current_operation_id()
        ...
        '3f2a9c'
        >>> print(current_operation_id())
        None

        ```
    """
    token = _operation_id.set(operation_id)
    try:
        yield
    finally:
        _operation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    r"""Format log records as one JSON object per line.

    The object has the keys ``time`` (ISO 8601, UTC, millisecond
    precision), ``level``, ``logger``, ``message`` and ``thread``, then
    ``location`` (``module:function:line``) unless disabled,
    ``operation_id`` inside ``operation_context``, ``exception`` when the
    record carries exception info, and the fields passed through
    ``extra``. Values JSON cannot encode are rendered with ``str``.

    Args:
        include_location: Whether to add the ``location`` key.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from arequest.utils.structured_logging import StructuredFormatter
        >>> record = logging.LogRecord("arequest", logging.INFO, "queue.py", 7, "started", None, None)
        >>> line = json.loads(StructuredFormatter(include_location=False).format(record))
        >>> line["level"], line["message"]
        ('INFO', 'started')

        ```
    """

    def __init__(self, *, include_location: bool = True) -> None:
        super().__init__()
        self._include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
        }
        if self._include_location:
            payload["location"] = f"{record.module}:{record.funcName}:{record.lineno}"

        operation_id = current_operation_id()
        if operation_id is not None:
            payload["operation_id"] = operation_id

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        )
        return json.dumps(payload, default=str)
