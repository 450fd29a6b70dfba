r"""Abstract base class for operations.

An operation is a unit of work with an explicit lifecycle state. The
work itself runs in ``execute`` on a queue worker, and the result is
delivered in ``complete`` once ``execute`` returned, raised, or was
skipped because the queue rejected the operation.
"""

from __future__ import annotations

__all__ = ["BaseOperation"]

import logging
import threading
import uuid
from abc import ABC, abstractmethod

from arequest.operation.queue import OperationQueue
from arequest.operation.state import OperationState

logger: logging.Logger = logging.getLogger(__name__)


class BaseOperation(ABC):
    """Abstract base class for operations.

    The state accessors do not validate transitions; the
    ``OperationQueue`` is responsible for moving an operation along one of
    the legal paths described in ``OperationState``.

    Attributes:
        operation_id: A short identifier used in log messages.
        error: The exception recorded when the operation was rejected or
            cancelled, ``None`` otherwise.
    """

    def __init__(self) -> None:
        self.operation_id = uuid.uuid4().hex[:12]
        self.error: BaseException | None = None
        self._state = OperationState.CREATED
        self._completed = False
        self._reserved = False
        self._reserve_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(id={self.operation_id}, state={self._state.value})"

    @property
    def state(self) -> OperationState:
        """The current lifecycle state."""
        return self._state

    @state.setter
    def state(self, state: OperationState) -> None:
        logger.debug(f"Operation {self.operation_id}: {self._state.value} -> {state.value}")
        self._state = state

    @property
    def is_completed(self) -> bool:
        """``True`` once ``complete`` delivered the result."""
        return self._completed

    def _reserve(self) -> bool:
        """Reserve the operation for a single queue.

        Returns:
            ``True`` the first time it is called on a ``CREATED``
            operation, ``False`` afterwards.
        """
        with self._reserve_lock:
            if self._reserved or self._state != OperationState.CREATED:
                return False
            self._reserved = True
            return True

    @abstractmethod
    def execute(self) -> None:
        """Perform the unit of work.

        This method runs on the worker thread of the queue. Any exception
        it raises is recorded by the worker, which then marks the
        operation as cancelled before calling ``complete``.
        """

    def complete(self) -> None:
        """Deliver the result of the operation.

        Only the first call delivers; later calls are ignored so the
        completion of an operation fires exactly once.
        """
        if self._completed:
            logger.debug(f"Operation {self.operation_id} already completed")
            return
        self._completed = True
        self._deliver()

    @abstractmethod
    def _deliver(self) -> None:
        """Deliver the result according to the final state."""

    def start(self) -> OperationQueue:
        """Run the operation on a new private queue.

        Returns:
            The queue the operation was added to.

        Example:
            ```pycon
            >>> import httpx
            >>> from arequest.operation import HttpOperation
            >>> op = HttpOperation(httpx.Request("GET", "https://httpbin.org/get"))
            >>> queue = op.start()  # doctest: +SKIP
            >>> queue.join()  # doctest: +SKIP
            True

            ```
        """
        queue = OperationQueue(name=f"operation-{self.operation_id}")
        queue.add_operation(self)
        return queue
