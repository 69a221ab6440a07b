# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the PyFly CSRF exception hierarchy."""

import pytest

from pyfly_csrf.kernel.exceptions import (
    CookieHeaderMissingError,
    CsrfError,
    CsrfFrameworkException,
    HttpError,
    MethodUnreadableError,
    SecretCookieMissingError,
    SignatureInvalidError,
    TokenCookieMissingError,
    TokenSecretMismatchError,
)


class TestCsrfFrameworkException:
    def test_basic_creation(self):
        exc = CsrfFrameworkException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_error_code_and_context(self):
        exc = CsrfFrameworkException("bad", code="X_001", context={"path": "/api"})
        assert exc.code == "X_001"
        assert exc.context["path"] == "/api"

    def test_context_not_shared_between_instances(self):
        a = CsrfFrameworkException("a")
        b = CsrfFrameworkException("b")
        a.context["k"] = "v"
        assert b.context == {}


class TestHttpError:
    def test_status_and_message(self):
        err = HttpError(400, "Bad input")
        assert err.status == 400
        assert err.message == "Bad input"
        assert str(err) == "Bad input"

    def test_defaults_to_403(self):
        assert HttpError(message="nope").status == 403

    def test_is_exception(self):
        assert isinstance(HttpError(500, "boom"), Exception)

    def test_repr(self):
        assert repr(HttpError(418, "teapot")) == "HttpError(status=418, message='teapot')"


ALL_KINDS = [
    (MethodUnreadableError, "CSRF_METHOD_UNREADABLE"),
    (CookieHeaderMissingError, "CSRF_COOKIE_HEADER_MISSING"),
    (TokenCookieMissingError, "CSRF_TOKEN_COOKIE_MISSING"),
    (SecretCookieMissingError, "CSRF_SECRET_COOKIE_MISSING"),
    (SignatureInvalidError, "CSRF_SIGNATURE_INVALID"),
    (TokenSecretMismatchError, "CSRF_TOKEN_SECRET_MISMATCH"),
]


class TestCsrfErrors:
    @pytest.mark.parametrize("error_cls, code", ALL_KINDS)
    def test_every_kind_is_403_with_code(self, error_cls, code):
        err = error_cls("Invalid CSRF token")
        assert isinstance(err, CsrfError)
        assert isinstance(err, HttpError)
        assert err.status == 403
        assert err.code == code
        assert err.message == "Invalid CSRF token"

    def test_catch_all_via_base(self):
        with pytest.raises(CsrfError):
            raise SignatureInvalidError("x")
