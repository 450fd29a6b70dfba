r"""Lifecycle states of an operation."""

from __future__ import annotations

__all__ = ["TERMINAL_STATES", "OperationState"]

from enum import Enum


class OperationState(Enum):
    """Lifecycle state of an operation.

    An operation follows one of three paths:

    - ``CREATED -> IN_QUEUE -> RUNNING -> FINISHED``
    - ``CREATED -> IN_QUEUE -> RUNNING -> CANCELLED``
    - ``CREATED -> REJECTED``

    Attributes:
        CREATED: The operation was built and never queued.
        IN_QUEUE: The operation waits in a queue.
        REJECTED: The queue refused the operation, it never ran.
        RUNNING: A worker is executing the operation.
        CANCELLED: The execution raised an exception.
        FINISHED: The execution returned normally.
    """

    CREATED = "created"
    IN_QUEUE = "in_queue"
    REJECTED = "rejected"
    RUNNING = "running"
    CANCELLED = "cancelled"
    FINISHED = "finished"


TERMINAL_STATES = frozenset(
    {OperationState.REJECTED, OperationState.CANCELLED, OperationState.FINISHED}
)
