"""
Error Mapping Tests
===================
"""
import pytest

from core.errors import (
    AuthorizationDenied, IdentityRequired, PoemError, PoemNotFound, QueryFailed,
    StoreUnavailable, ValidationFailed, WriteRejected,
)
from dependencies.errors import http_error


class TestPoemError:

    def test_default_message(self):
        assert IdentityRequired().message == IdentityRequired.default_message

    def test_custom_message(self):
        assert str(WriteRejected("拒否")) == "拒否"


class TestHttpError:

    @pytest.mark.parametrize("error, code", [
        (ValidationFailed(), 400),
        (IdentityRequired(), 401),
        (AuthorizationDenied(), 403),
        (PoemNotFound(), 404),
        (WriteRejected(), 409),
        (QueryFailed(), 502),
        (StoreUnavailable(), 503),
        (PoemError(), 500),
    ])
    def test_status(self, error, code):
        exc = http_error(error)
        assert exc.status_code == code
        assert exc.detail == error.message
