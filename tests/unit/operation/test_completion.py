from __future__ import annotations

from unittest.mock import Mock

import httpx

from arequest.operation import CallbackCompletion, Completion

REQUEST = httpx.Request("GET", "https://api.example.com/data")


########################################
#     Tests for CallbackCompletion     #
########################################


def test_callback_completion_is_completion() -> None:
    """Test that CallbackCompletion satisfies the Completion protocol."""
    assert isinstance(CallbackCompletion(), Completion)


def test_callback_completion_success() -> None:
    """Test that ``success`` calls ``on_success`` only."""
    on_success, on_failure = Mock(), Mock()
    completion = CallbackCompletion(on_success=on_success, on_failure=on_failure)

    completion.success(REQUEST, b"data")

    on_success.assert_called_once_with(REQUEST, b"data")
    on_failure.assert_not_called()


def test_callback_completion_failure() -> None:
    """Test that ``failure`` calls ``on_failure`` only."""
    on_success, on_failure = Mock(), Mock()
    completion = CallbackCompletion(on_success=on_success, on_failure=on_failure)
    error = RuntimeError("boom")

    completion.failure(REQUEST, error)

    on_failure.assert_called_once_with(REQUEST, error)
    on_success.assert_not_called()


def test_callback_completion_without_callbacks() -> None:
    """Test that missing callbacks are ignored."""
    completion = CallbackCompletion()
    completion.success(REQUEST, b"data")
    completion.failure(REQUEST, RuntimeError("boom"))
