import inspect

from jiraboard.utils.errors import ClientError, InternalError, client_err, wrap_err


def test_client_err_carries_code_and_message():
    cause = ValueError("inner")
    err = client_err(404, "tenant not found", cause)
    assert err.code == 404
    assert err.message == "tenant not found"
    assert str(err) == "tenant not found"
    assert err.err is cause


def test_client_err_without_cause():
    err = client_err(400, "bad input")
    assert err.err is None
    assert isinstance(err, ClientError)
    assert str(err) == "bad input"


def test_wrap_err_none_returns_none():
    assert wrap_err(None) is None
    assert wrap_err(None, "context") is None


def test_wrap_err_keeps_message_without_prefix():
    original = RuntimeError("boom")
    wrapped = wrap_err(original)
    assert str(wrapped) == str(original)
    assert wrapped.err is original
    assert wrapped.__cause__ is original


def test_wrap_err_prefixes_message():
    wrapped = wrap_err(RuntimeError("boom"), "loading")
    assert str(wrapped) == "loading: boom"


def test_wrap_err_records_call_site():
    wrapped, line = wrap_err(KeyError("k")), inspect.currentframe().f_lineno
    assert isinstance(wrapped, InternalError)
    assert wrapped.file == __file__
    assert wrapped.line == line
    assert wrapped.location() == f"{__file__}:{line}"