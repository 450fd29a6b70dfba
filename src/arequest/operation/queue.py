r"""FIFO operation queue drained by a single worker thread.

Each ``OperationQueue`` owns one worker thread that executes its
operations one at a time, in the order they were added. The worker is
started lazily when an operation arrives and exits as soon as the queue
is empty; the next ``add_operation`` starts a new one. Independent queues
run in parallel and share no state.

Example:
    ```pycon
    >>> import httpx
    >>> from arequest.operation import CallbackCompletion, HttpOperation, OperationQueue
    >>> queue = OperationQueue()
    >>> completion = CallbackCompletion(
    ...     on_success=lambda request, content: print(len(content)),
    ...     on_failure=lambda request, error: print(error),
    ... )
    >>> queue.add_operation(
    ...     HttpOperation(httpx.Request("GET", "https://httpbin.org/get"), completion)
    ... )  # doctest: +SKIP
    >>> queue.join()  # doctest: +SKIP
    True

    ```
"""

from __future__ import annotations

__all__ = ["OperationQueue"]

import logging
import queue
import threading
import time
from typing import TYPE_CHECKING

from arequest.operation.state import OperationState
from arequest.utils.structured_logging import operation_context

if TYPE_CHECKING:
    from collections.abc import Iterable

    from arequest.operation.base import BaseOperation

logger: logging.Logger = logging.getLogger(__name__)


class OperationQueue:
    r"""FIFO queue of operations executed by one lazily started worker.

    The decision to start a worker and the worker's decision to stop are
    both taken under the same lock, so at most one worker thread runs
    per queue at any time.

    Args:
        maxsize: Maximum number of pending operations. Operations added
            while the queue is full are rejected. ``0`` means unbounded.
        name: Name of the queue, used for the worker thread name and in
            log messages.

    Raises:
        ValueError: If ``maxsize`` is negative.

    Example:
        ```pycon
        >>> from arequest.operation import OperationQueue
        >>> queue = OperationQueue(maxsize=10)
        >>> queue.is_empty()
        True
        >>> queue.is_running
        False

        ```
    """

    def __init__(self, maxsize: int = 0, name: str = "operation-queue") -> None:
        if maxsize < 0:
            msg = f"maxsize must be >= 0, got {maxsize}"
            raise ValueError(msg)
        self._name = name
        self._queue: queue.Queue[BaseOperation] = queue.Queue(maxsize=maxsize)
        self._worker: threading.Thread | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(name={self._name!r}, "
            f"maxsize={self._queue.maxsize}, pending={len(self)})"
        )

    def __len__(self) -> int:
        return self._queue.qsize()

    @property
    def name(self) -> str:
        """The name of the queue."""
        return self._name

    @property
    def maxsize(self) -> int:
        """Maximum number of pending operations, ``0`` if unbounded."""
        return self._queue.maxsize

    @property
    def is_running(self) -> bool:
        """``True`` while a worker thread is alive for this queue."""
        with self._lock:
            return self._worker is not None

    def is_empty(self) -> bool:
        """Indicate whether no operation is pending.

        Operations currently executing are not pending.

        Returns:
            ``True`` if no operation waits in the queue.
        """
        return self._queue.empty()

    def add_operation(self, operation: BaseOperation) -> None:
        """Append an operation to the tail of the queue.

        An accepted operation moves to ``IN_QUEUE`` and a worker is started
        if none is running. A refused operation moves to ``REJECTED`` and is
        completed immediately on the calling thread with an
        ``OperationRejectedError``, without being executed.

        Args:
            operation: The operation to add. Its state must be ``CREATED``.

        Raises:
            ValueError: If the operation was already queued, executed or
                rejected.
        """
        if not operation._reserve():
            msg = (
                f"operation {operation.operation_id} cannot be queued in state "
                f"{operation.state.value}, it was already added to a queue"
            )
            raise ValueError(msg)

        with self._lock:
            try:
                self._queue.put_nowait(operation)
            except queue.Full:
                rejected = True
            else:
                rejected = False
                operation.state = OperationState.IN_QUEUE
                if self._worker is None:
                    self._start_worker()

        if rejected:
            logger.warning(
                f"Queue {self._name} is full ({self._queue.maxsize} pending), "
                f"rejecting operation {operation.operation_id}"
            )
            operation.state = OperationState.REJECTED
            operation.complete()

    def add_operations(self, operations: Iterable[BaseOperation]) -> None:
        """Add several operations, preserving their order.

        Args:
            operations: The operations to add.
        """
        for operation in operations:
            self.add_operation(operation)

    def cancel_all_operations(self) -> list[BaseOperation]:
        """Discard every pending operation.

        Discarded operations are neither executed nor completed. An
        operation that is already executing is not interrupted and is
        completed normally. Calling this method on an empty queue does
        nothing, and the queue keeps accepting new operations afterwards.

        Returns:
            The discarded operations, in queue order.
        """
        discarded = []
        with self._lock:
            while True:
                try:
                    discarded.append(self._queue.get_nowait())
                except queue.Empty:
                    break
        if discarded:
            logger.debug(f"Queue {self._name}: discarded {len(discarded)} pending operation(s)")
        return discarded

    def join(self, timeout: float | None = None) -> bool:
        """Wait until the queue is drained and its worker exited.

        Args:
            timeout: Maximum number of seconds to wait, ``None`` to wait
                without limit.

        Returns:
            ``True`` if the queue is idle, ``False`` if the timeout elapsed
            or the worker died without releasing the queue.

        Raises:
            RuntimeError: If called from the worker thread of this queue.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                worker = self._worker
            if worker is None:
                return True
            if worker is threading.current_thread():
                msg = f"cannot join queue {self._name} from its own worker"
                raise RuntimeError(msg)
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            worker.join(remaining)
            if worker.is_alive():
                return False
            with self._lock:
                if self._worker is worker:
                    # the worker died without releasing the queue
                    return False

    def _start_worker(self) -> None:
        """Create and start the worker thread.

        Must be called with ``self._lock`` held.
        """
        self._worker = threading.Thread(target=self._run, name=f"{self._name}-worker", daemon=True)
        logger.debug(f"Queue {self._name}: starting worker")
        self._worker.start()

    def _next_operation(self) -> BaseOperation | None:
        """Take the next operation and mark it running.

        Clears the worker handle when the queue is empty, in which case
        the worker must exit.

        Returns:
            The next operation, or ``None`` if the queue is empty.
        """
        with self._lock:
            try:
                operation = self._queue.get_nowait()
            except queue.Empty:
                self._worker = None
                return None
            operation.state = OperationState.RUNNING
            return operation

    def _run(self) -> None:
        """Worker loop: execute and complete operations until the queue
        is empty."""
        try:
            while (operation := self._next_operation()) is not None:
                with operation_context(operation.operation_id):
                    self._run_operation(operation)
        finally:
            with self._lock:
                if self._worker is threading.current_thread():
                    # stopped by an exception, pending operations get a new worker
                    logger.error(f"Queue {self._name}: worker stopped unexpectedly")
                    self._worker = None
                    if not self._queue.empty():
                        self._start_worker()
        logger.debug(f"Queue {self._name}: queue drained, worker exiting")

    def _run_operation(self, operation: BaseOperation) -> None:
        """Execute then complete one operation.

        An exception that is not an ``Exception``, such as ``SystemExit``,
        still cancels and completes the operation, then stops the worker.

        Args:
            operation: The operation to run, in ``RUNNING`` state.
        """
        try:
            operation.execute()
        except Exception as exc:
            logger.debug(
                f"Operation {operation.operation_id} failed with {type(exc).__name__}: {exc}"
            )
            operation.error = exc
            operation.state = OperationState.CANCELLED
        except BaseException as exc:
            operation.error = exc
            operation.state = OperationState.CANCELLED
            self._complete_operation(operation)
            raise
        else:
            operation.state = OperationState.FINISHED
        self._complete_operation(operation)

    def _complete_operation(self, operation: BaseOperation) -> None:
        try:
            operation.complete()
        except Exception:
            logger.exception(f"Error while completing operation {operation.operation_id}")
