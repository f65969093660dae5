import io
import json

import pytest
import requests
import responses

from jiraboard.httpclient import LoggingAdapter, new_client, parse_body
from jiraboard.logger import new_logger


@pytest.fixture
def log_stream(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    stream = io.StringIO()
    new_logger("DEBUG", stream=stream)
    return stream


@pytest.fixture
def mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as requests_mock:
        yield requests_mock


def _entries(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_logging_round_tripper(log_stream, mock):
    mock.add(
        responses.POST,
        "http://example.com/test",
        body='{"message": "success", "data": {"id": 1}}',
        status=200,
        content_type="application/json",
    )
    client = new_client(5)
    resp = client.post(
        "http://example.com/test?q=1",
        data=json.dumps({"key": "value"}),
        headers={"Content-Type": "application/json", "X-Custom-Header": "test-val"},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "success"

    entry = _entries(log_stream)[-1]
    assert entry["msg"] == "Outgoing HTTP request"
    assert entry["label"] == "outgoing-request-log"
    assert entry["method"] == "POST"
    assert entry["request_payload"] == {"key": "value"}
    assert entry["query_params"] == {"q": "1"}
    assert entry["request_headers"]["X-Custom-Header"] == "test-val"
    assert entry["status"] == 200
    assert entry["response_message"] == "success"
    assert entry["response_body"] == {"message": "success", "data": {"id": 1}}
    assert entry["path"] == "/test"
    assert entry["host"] == "example.com"


def test_request_id_is_added(log_stream, mock):
    mock.add(responses.GET, "http://example.com/ping", body="pong", status=200)
    resp = new_client(5).get("http://example.com/ping")
    assert resp.text == "pong"
    sent_id = mock.calls[0].request.headers["X-Request-Id"]
    assert len(sent_id) == 36
    assert _entries(log_stream)[-1]["request_id"] == sent_id


def test_existing_request_id_is_kept(log_stream, mock):
    mock.add(responses.GET, "http://example.com/ping", body="pong", status=200)
    resp = new_client(5).get("http://example.com/ping", headers={"X-Request-Id": "abc"})
    assert resp.text == "pong"
    assert mock.calls[0].request.headers["X-Request-Id"] == "abc"
    assert _entries(log_stream)[-1]["request_id"] == "abc"


def test_transport_error_is_logged_and_raised(log_stream, mock):
    mock.add(responses.GET, "http://example.com/down", body=requests.ConnectionError("boom"))
    with pytest.raises(requests.ConnectionError):
        new_client(5).get("http://example.com/down")
    entry = _entries(log_stream)[-1]
    assert entry["status"] == 0
    assert "boom" in entry["error"]


def test_local_env_suppresses_logging(log_stream, mock, monkeypatch):
    monkeypatch.setenv("APP_ENV", "LOCAL")
    mock.add(responses.GET, "http://example.com/ping", body="pong", status=200)
    resp = new_client(5).get("http://example.com/ping")
    assert resp.text == "pong"
    assert log_stream.getvalue() == ""


def test_default_timeout():
    adapter = new_client(0).get_adapter("http://example.com/")
    assert isinstance(adapter, LoggingAdapter)
    assert adapter.timeout == 30


def test_parse_body_empty():
    assert parse_body(b"", "application/json") is None


def test_parse_body_json_and_invalid_json():
    assert parse_body(b'{"a": 1}', "application/json; charset=utf-8") == {"a": 1}
    assert parse_body(b"{bad", "application/json") == "{bad"


def test_parse_body_multipart():
    result = parse_body(b"abc", "multipart/form-data; boundary=x")
    assert result["message"] == "multipart/form-data content (binary data not logged)"
    assert result["size_bytes"] == 3


@pytest.mark.parametrize("content_type", ["image/png", "video/mp4", "audio/mpeg", "application/octet-stream"])
def test_parse_body_binary(content_type):
    result = parse_body(b"\x00\x01", content_type)
    assert result["message"] == "binary/media content not logged"
    assert result["content_type"] == content_type


def test_parse_body_form_and_text():
    assert parse_body(b"a=1&b=2", "application/x-www-form-urlencoded") == "a=1&b=2"
    assert parse_body(b"hello", "text/plain") == "hello"


def test_parse_body_truncates_large_text():
    body = b"x" * 1500
    result = parse_body(body, "text/plain")
    assert result["truncated_at"] == 1000
    assert result["size_bytes"] == 1500
    assert result["preview"] == "x" * 1000