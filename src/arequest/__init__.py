r"""Root package of ``arequest``, an asynchronous HTTP client running
requests as operations on FIFO worker queues."""

from __future__ import annotations

__all__ = [
    "CallbackCompletion",
    "ClientConfig",
    "Completion",
    "HttpClient",
    "HttpOperation",
    "HttpRequestError",
    "ImageRequestOperation",
    "JsonRequestOperation",
    "OperationCancelledError",
    "OperationQueue",
    "OperationRejectedError",
    "OperationState",
    "ParameterEncoding",
    "ResponseDecodeError",
    "ResponseValidationError",
    "ResponseValidator",
    "TransportOperation",
    "XmlRequestOperation",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from arequest.client import HttpClient
from arequest.core.config import ClientConfig
from arequest.encoding import ParameterEncoding
from arequest.exceptions import (
    HttpRequestError,
    OperationCancelledError,
    OperationRejectedError,
    ResponseDecodeError,
    ResponseValidationError,
)
from arequest.operation import (
    CallbackCompletion,
    Completion,
    HttpOperation,
    ImageRequestOperation,
    JsonRequestOperation,
    OperationQueue,
    OperationState,
    ResponseValidator,
    TransportOperation,
    XmlRequestOperation,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
