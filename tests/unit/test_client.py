r"""Unit tests for HttpClient."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING
from unittest.mock import Mock

import httpx
import pytest

from arequest import (
    ClientConfig,
    HttpClient,
    HttpOperation,
    JsonRequestOperation,
    OperationRejectedError,
    OperationState,
    ParameterEncoding,
    ResponseValidationError,
)
from arequest.client import default_user_agent

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://api.example.com"
WAIT = 5.0


def echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "url": str(request.url),
            "args": dict(request.url.params),
            "headers": dict(request.headers),
            "body": request.content.decode(),
        },
    )


@pytest.fixture
def echo_client(make_client: Callable[..., httpx.Client]) -> httpx.Client:
    return make_client(echo)


################################
#     Tests for HttpClient     #
################################


def test_http_client_base_url() -> None:
    client = HttpClient(BASE_URL)
    assert client.base_url == "https://api.example.com/"
    assert repr(client) == "HttpClient(base_url='https://api.example.com/')"
    client.close()


def test_http_client_empty_base_url() -> None:
    with pytest.raises(ValueError, match=r"base_url cannot be empty"):
        HttpClient("")


def test_http_client_default_config() -> None:
    with HttpClient(BASE_URL) as client:
        assert client.config == ClientConfig()
        assert client.parameter_encoding == ParameterEncoding.FORM
        assert client.operation_queue.maxsize == 0


def test_http_client_queue_size_from_config() -> None:
    with HttpClient(BASE_URL, config=ClientConfig(max_queue_size=3)) as client:
        assert client.operation_queue.maxsize == 3


def test_http_clients_have_separate_queues() -> None:
    with HttpClient(BASE_URL) as first, HttpClient(BASE_URL) as second:
        assert first.operation_queue is not second.operation_queue


def test_default_user_agent() -> None:
    user_agent = default_user_agent()
    assert user_agent.startswith("arequest/")
    assert "Python/" in user_agent


def test_http_client_user_agent_header() -> None:
    with HttpClient(BASE_URL) as client:
        assert client.default_header("User-Agent") == default_user_agent()


def test_http_client_custom_user_agent() -> None:
    with HttpClient(BASE_URL, config=ClientConfig(user_agent="my-app/1.0")) as client:
        assert client.default_header("user-agent") == "my-app/1.0"


def test_http_client_set_default_header() -> None:
    with HttpClient(BASE_URL) as client:
        client.set_default_header("Accept", "application/json")
        client.set_default_header("accept", "text/xml")
        assert client.default_header("ACCEPT") == "text/xml"
        assert "Accept" not in client.default_headers


def test_http_client_remove_default_header() -> None:
    with HttpClient(BASE_URL) as client:
        client.set_default_header("Accept", "application/json")
        client.set_default_header("Accept", None)
        assert client.default_header("Accept") is None


def test_http_client_default_headers_copy() -> None:
    with HttpClient(BASE_URL) as client:
        client.default_headers["X-Test"] = "1"
        assert client.default_header("X-Test") is None


def test_http_client_authorization_header() -> None:
    with HttpClient(BASE_URL) as client:
        client.set_authorization_header("username", "12345678")
        assert client.default_header("Authorization") == "Basic dXNlcm5hbWU6MTIzNDU2Nzg="

        client.clear_authorization_header()
        assert client.default_header("Authorization") is None


###################################
#     Tests for build_request     #
###################################


def test_build_request_get_query_string() -> None:
    with HttpClient(BASE_URL) as client:
        request = client.build_request("get", "users", {"user": {"name": "Fritz", "age": "68"}})

    assert request.method == "GET"
    assert request.url.path == "/users"
    assert request.url.params["user[name]"] == "Fritz"
    assert request.url.params["user[age]"] == "68"
    assert request.content == b""


@pytest.mark.parametrize("method", ["GET", "HEAD", "DELETE"])
def test_build_request_query_string_methods(method: str) -> None:
    with HttpClient(BASE_URL) as client:
        request = client.build_request(method, "items", {"ids": ["1", "2"]})

    assert request.url.params.get_list("ids[]") == ["1", "2"]
    assert "Content-Type" not in request.headers


def test_build_request_strips_leading_slash() -> None:
    with HttpClient(f"{BASE_URL}/api") as client:
        request = client.build_request("GET", "/users")
    assert str(request.url) == "https://api.example.com/api/users"


def test_build_request_path_with_query() -> None:
    with HttpClient(BASE_URL) as client:
        request = client.build_request("GET", "search?page=2", {"q": "python"})

    assert request.url.params["page"] == "2"
    assert request.url.params["q"] == "python"


def test_build_request_without_parameters() -> None:
    with HttpClient(BASE_URL) as client:
        request = client.build_request("GET", "users")
    assert str(request.url) == "https://api.example.com/users"


def test_build_request_default_headers() -> None:
    with HttpClient(BASE_URL) as client:
        client.set_authorization_header("username", "12345678")
        request = client.build_request("GET", "users")

    assert request.headers["Authorization"] == "Basic dXNlcm5hbWU6MTIzNDU2Nzg="
    assert request.headers["User-Agent"] == default_user_agent()


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
def test_build_request_form_body(method: str) -> None:
    with HttpClient(BASE_URL) as client:
        request = client.build_request(method, "users", {"user": {"name": "Fritz", "age": "68"}})

    assert request.content == b"user[age]=68&user[name]=Fritz"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded; charset=utf-8"
    assert request.headers["Content-Length"] == "29"
    assert request.url.query == b""


def test_build_request_json_body() -> None:
    with HttpClient(BASE_URL) as client:
        client.parameter_encoding = ParameterEncoding.JSON
        request = client.build_request("POST", "users", {"user": {"name": "Fritz"}})

    assert request.content == b'{"user":{"name":"Fritz"}}'
    assert request.headers["Content-Type"] == "application/json; charset=utf-8"


def test_build_request_body_string_encoding() -> None:
    config = ClientConfig(parameter_encoding=ParameterEncoding.JSON, string_encoding="latin-1")
    with HttpClient(BASE_URL, config=config) as client:
        request = client.build_request("POST", "users", {"name": "Müller"})

    assert request.content == '{"name":"Müller"}'.encode("latin-1")
    assert request.headers["Content-Type"] == "application/json; charset=latin-1"


def test_build_request_post_without_parameters() -> None:
    with HttpClient(BASE_URL) as client:
        request = client.build_request("POST", "users")

    assert request.content == b""
    assert "Content-Type" not in request.headers


def test_build_request_multipart() -> None:
    with HttpClient(BASE_URL) as client:
        request = client.build_request(
            "POST",
            "upload",
            {"title": "report"},
            files={"file": ("report.txt", b"file content", "text/plain")},
        )

    content = request.read()
    assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    assert b'name="title"' in content
    assert b"report" in content
    assert b'filename="report.txt"' in content
    assert b"file content" in content


def test_build_request_files_without_body() -> None:
    with HttpClient(BASE_URL) as client, pytest.raises(ValueError, match=r"files can only be sent"):
        client.build_request("GET", "upload", files={"file": b"data"})


####################################
#     Tests for the operations     #
####################################


def test_http_client_operation_with_request(echo_client: httpx.Client) -> None:
    factory = Mock()
    completion = Mock()
    with HttpClient(BASE_URL, client=echo_client, operation_factory=factory) as client:
        request = client.build_request("GET", "users")
        operation = client.operation_with_request(request, completion)

    factory.assert_called_once_with(request, completion, client=echo_client)
    assert operation is factory.return_value


def test_http_client_default_operation(echo_client: httpx.Client) -> None:
    with HttpClient(BASE_URL, client=echo_client) as client:
        operation = client.operation_with_request(client.build_request("GET", "users"))
    assert type(operation) is HttpOperation
    assert operation.state == OperationState.CREATED


def test_http_client_get(echo_client: httpx.Client, mock_completion: Mock) -> None:
    with HttpClient(
        BASE_URL, client=echo_client, operation_factory=JsonRequestOperation
    ) as client:
        operation = client.get("search", {"q": "python"}, mock_completion)

    assert isinstance(operation, JsonRequestOperation)
    assert operation.state == OperationState.FINISHED
    request, document = mock_completion.success.call_args.args
    assert request is operation.request
    assert document["method"] == "GET"
    assert document["args"] == {"q": "python"}
    mock_completion.failure.assert_not_called()


@pytest.mark.parametrize("method", ["post", "put", "patch"])
def test_http_client_body_methods(
    echo_client: httpx.Client, mock_completion: Mock, method: str
) -> None:
    with HttpClient(
        BASE_URL, client=echo_client, operation_factory=JsonRequestOperation
    ) as client:
        getattr(client, method)("users", {"name": "Fritz"}, mock_completion)

    document = mock_completion.success.call_args.args[1]
    assert document["method"] == method.upper()
    assert document["body"] == "name=Fritz"
    assert document["headers"]["content-type"] == "application/x-www-form-urlencoded; charset=utf-8"


@pytest.mark.parametrize("method", ["delete", "head"])
def test_http_client_query_methods(
    echo_client: httpx.Client, mock_completion: Mock, method: str
) -> None:
    with HttpClient(BASE_URL, client=echo_client) as client:
        operation = getattr(client, method)("users", {"id": "7"}, mock_completion)

    assert operation.request.method == method.upper()
    assert operation.request.url.params["id"] == "7"
    mock_completion.success.assert_called_once()


def test_http_client_operation_factory_override(
    echo_client: httpx.Client, mock_completion: Mock
) -> None:
    with HttpClient(BASE_URL, client=echo_client) as client:
        client.get("users", completion=mock_completion, operation_factory=JsonRequestOperation)

    assert isinstance(mock_completion.success.call_args.args[1], dict)


def test_http_client_sends_authorization(
    echo_client: httpx.Client, mock_completion: Mock
) -> None:
    with HttpClient(
        BASE_URL, client=echo_client, operation_factory=JsonRequestOperation
    ) as client:
        client.set_authorization_header("username", "12345678")
        client.get("basic-auth/username/12345678", completion=mock_completion)

    document = mock_completion.success.call_args.args[1]
    assert document["headers"]["authorization"] == "Basic dXNlcm5hbWU6MTIzNDU2Nzg="


def test_http_client_not_found(
    make_client: Callable[..., httpx.Client], mock_completion: Mock
) -> None:
    http = make_client(lambda request: httpx.Response(404, json={"error": "not found"}))
    with HttpClient(BASE_URL, client=http, operation_factory=JsonRequestOperation) as client:
        client.get("status/404", completion=mock_completion)

    mock_completion.success.assert_not_called()
    error = mock_completion.failure.call_args.args[1]
    assert isinstance(error, ResponseValidationError)
    assert "[200, 299]" in str(error)
    assert "404" in str(error)


def test_http_client_operations_run_in_order(make_client: Callable[..., httpx.Client]) -> None:
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200)

    with HttpClient(BASE_URL, client=make_client(handler)) as client:
        for index in range(5):
            client.get(f"items/{index}")

    assert paths == [f"/items/{index}" for index in range(5)]


def test_http_client_rejects_when_queue_full(
    make_client: Callable[..., httpx.Client], gate: threading.Event
) -> None:
    started = threading.Event()

    def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        gate.wait(WAIT)
        return httpx.Response(200)

    completion = Mock()
    config = ClientConfig(max_queue_size=1)
    with HttpClient(BASE_URL, config=config, client=make_client(handler)) as client:
        client.get("first")
        assert started.wait(WAIT)
        client.get("second")
        rejected = client.get("third", completion=completion)

        assert rejected.state == OperationState.REJECTED
        error = completion.failure.call_args.args[1]
        assert isinstance(error, OperationRejectedError)
        gate.set()


def test_http_client_cancel_all_operations(
    make_client: Callable[..., httpx.Client], gate: threading.Event
) -> None:
    started = threading.Event()

    def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        gate.wait(WAIT)
        return httpx.Response(200)

    with HttpClient(BASE_URL, client=make_client(handler)) as client:
        assert client.cancel_all_operations() == []
        client.get("first")
        assert started.wait(WAIT)
        pending = [client.get("second"), client.get("third")]

        assert client.cancel_all_operations() == pending
        gate.set()
        assert client.join(WAIT)

    assert all(operation.state == OperationState.IN_QUEUE for operation in pending)


def test_http_client_enqueue_operation(echo_client: httpx.Client, mock_completion: Mock) -> None:
    with HttpClient(BASE_URL, client=echo_client) as client:
        operation = JsonRequestOperation(
            client.build_request("GET", "users"), mock_completion, client=echo_client
        )
        client.enqueue_operation(operation)
        assert client.join(WAIT)

    assert mock_completion.success.call_args.args[1]["method"] == "GET"


def test_http_client_keeps_external_client_open(echo_client: httpx.Client) -> None:
    with HttpClient(BASE_URL, client=echo_client):
        pass
    assert not echo_client.is_closed


def test_http_client_closes_own_client() -> None:
    client = HttpClient(BASE_URL)
    client.close()
    assert client._client.is_closed
    client.close()
