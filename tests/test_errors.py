import pytest

from flexnet.errors import ServerError


def test_str_is_message():
    err = ServerError("empty read")
    assert str(err) == "empty read"


def test_message_attribute_kept():
    err = ServerError("cannot read cert")
    assert err.message == "cannot read cert"


def test_raised_and_caught_as_exception():
    err = ServerError("cannot start server because: boom")
    assert err.message == "cannot start server because: boom"
    assert str(err) == "cannot start server because: boom"
    with pytest.raises(ServerError) as info:
        raise err
    assert info.value is err


def test_formatting_in_fstring():
    err = ServerError("abc")
    assert f"server ended with: {err}" == "server ended with: abc"