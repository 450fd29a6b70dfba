r"""Operations, the queue executing them, and their completion
contract."""

from __future__ import annotations

__all__ = [
    "DEFAULT_ACCEPTABLE_STATUS_CODES",
    "TERMINAL_STATES",
    "BaseOperation",
    "CallbackCompletion",
    "Completion",
    "HttpOperation",
    "ImageRequestOperation",
    "JsonRequestOperation",
    "OperationQueue",
    "OperationState",
    "ResponseValidator",
    "TransportOperation",
    "ValidatingCompletion",
    "XmlRequestOperation",
]

from arequest.operation.base import BaseOperation
from arequest.operation.completion import CallbackCompletion, Completion
from arequest.operation.http import HttpOperation, ValidatingCompletion
from arequest.operation.image_request import ImageRequestOperation
from arequest.operation.json_request import JsonRequestOperation
from arequest.operation.queue import OperationQueue
from arequest.operation.state import TERMINAL_STATES, OperationState
from arequest.operation.transport import TransportOperation
from arequest.operation.validator import DEFAULT_ACCEPTABLE_STATUS_CODES, ResponseValidator
from arequest.operation.xml_request import XmlRequestOperation
