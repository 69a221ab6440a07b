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
"""Tests for the pure validation decision."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.middleware.validation import (
    INTERNAL_ERROR_MESSAGE,
    Accepted,
    Exempt,
    Rejected,
    evaluate,
)
from pyfly_csrf.security.signing import sign
from pyfly_csrf.security.tokens import Tokens
from pyfly_csrf.web.cookies import CookieOptions, parse_cookie_header

TOKENS = Tokens()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _cookie_header(cookies: dict[str, str]) -> str:
    return "; ".join(f"{k}={v}" for k, v in cookies.items())


def _valid_cookies(signing_key: str | None = None, token_key: str = "XSRF-TOKEN") -> dict[str, str]:
    secret = TOKENS.create_secret()
    token = TOKENS.create(secret)
    if signing_key is not None:
        token = sign(token, signing_key)
    return {"csrfSecret": secret, token_key: token}


def _set_cookie_value(set_cookie: str) -> tuple[str, str]:
    name, _, rest = set_cookie.partition("=")
    return name, rest.split(";", 1)[0]


class _ExplodingTokens(Tokens):
    def __init__(self, exc: Exception) -> None:
        super().__init__()
        self._exc = exc

    def verify(self, secret: object, token: object) -> bool:
        raise self._exc


class _StatusError(Exception):
    status = 418


# ---------------------------------------------------------------------------
# METHOD_CHECK
# ---------------------------------------------------------------------------


class TestMethodCheck:
    @pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS"])
    def test_default_exempt_methods(self, method: str) -> None:
        assert evaluate(method, None, CsrfOptions()) == Exempt()

    def test_exempt_regardless_of_cookies(self) -> None:
        assert evaluate("GET", "XSRF-TOKEN=garbage", CsrfOptions()) == Exempt()

    def test_custom_exempt_methods(self) -> None:
        opts = CsrfOptions(ignored_methods=frozenset({"GET", "POST"}))
        assert evaluate("POST", None, opts) == Exempt()

    def test_method_match_is_exact(self) -> None:
        verdict = evaluate("get", None, CsrfOptions())
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_COOKIE_HEADER_MISSING"

    @pytest.mark.parametrize("method", [None, 42, b"POST"])
    def test_unreadable_method(self, method: object) -> None:
        verdict = evaluate(method, _cookie_header(_valid_cookies()), CsrfOptions())
        assert verdict == Rejected(403, "Invalid CSRF token", "CSRF_METHOD_UNREADABLE")


# ---------------------------------------------------------------------------
# COOKIE_PRESENCE_CHECK / TOKEN_EXTRACTION
# ---------------------------------------------------------------------------


class TestCookieChecks:
    def test_no_cookie_header(self) -> None:
        verdict = evaluate("POST", None, CsrfOptions())
        assert verdict == Rejected(403, "Invalid CSRF token", "CSRF_COOKIE_HEADER_MISSING")
        assert verdict.body == {"message": "Invalid CSRF token"}

    def test_token_cookie_missing(self) -> None:
        cookies = _valid_cookies()
        del cookies["XSRF-TOKEN"]
        verdict = evaluate("POST", _cookie_header(cookies), CsrfOptions())
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_TOKEN_COOKIE_MISSING"

    def test_token_cookie_empty(self) -> None:
        cookies = _valid_cookies() | {"XSRF-TOKEN": ""}
        verdict = evaluate("POST", _cookie_header(cookies), CsrfOptions())
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_TOKEN_COOKIE_MISSING"

    def test_secret_cookie_missing(self) -> None:
        cookies = _valid_cookies()
        del cookies["csrfSecret"]
        verdict = evaluate("POST", _cookie_header(cookies), CsrfOptions())
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_SECRET_COOKIE_MISSING"

    def test_empty_cookie_header(self) -> None:
        verdict = evaluate("POST", "", CsrfOptions())
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_TOKEN_COOKIE_MISSING"

    def test_custom_error_message(self) -> None:
        verdict = evaluate("POST", None, CsrfOptions(error_message="Nope"))
        assert verdict == Rejected(403, "Nope", "CSRF_COOKIE_HEADER_MISSING")

    def test_custom_token_key(self) -> None:
        opts = CsrfOptions(token_key="MY-TOKEN")
        cookies = _valid_cookies(token_key="MY-TOKEN")
        assert isinstance(evaluate("POST", _cookie_header(cookies), opts), Accepted)


# ---------------------------------------------------------------------------
# SIGNATURE_CHECK / VERIFY
# ---------------------------------------------------------------------------


class TestSignatureAndVerify:
    def test_signed_token_accepted(self) -> None:
        opts = CsrfOptions(secret="k")
        verdict = evaluate("POST", _cookie_header(_valid_cookies("k")), opts)
        assert isinstance(verdict, Accepted)

    def test_tampered_signed_token(self) -> None:
        cookies = _valid_cookies("k")
        token = cookies["XSRF-TOKEN"]
        cookies["XSRF-TOKEN"] = ("X" if token[0] != "X" else "Y") + token[1:]
        verdict = evaluate("POST", _cookie_header(cookies), CsrfOptions(secret="k"))
        assert isinstance(verdict, Rejected)
        assert verdict.status == 403
        assert verdict.code == "CSRF_SIGNATURE_INVALID"

    def test_unsigned_token_when_key_configured(self) -> None:
        verdict = evaluate("POST", _cookie_header(_valid_cookies()), CsrfOptions(secret="k"))
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_SIGNATURE_INVALID"

    def test_token_from_other_secret(self) -> None:
        cookies = _valid_cookies()
        cookies["csrfSecret"] = TOKENS.create_secret()
        verdict = evaluate("POST", _cookie_header(cookies), CsrfOptions())
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_TOKEN_SECRET_MISMATCH"

    def test_validly_signed_token_for_other_secret(self) -> None:
        cookies = _valid_cookies("k")
        cookies["csrfSecret"] = TOKENS.create_secret()
        verdict = evaluate("POST", _cookie_header(cookies), CsrfOptions(secret="k"))
        assert isinstance(verdict, Rejected)
        assert verdict.code == "CSRF_TOKEN_SECRET_MISMATCH"


# ---------------------------------------------------------------------------
# ROTATE
# ---------------------------------------------------------------------------


class TestRotate:
    def test_accepted_carries_rotated_token_cookie(self) -> None:
        cookies = _valid_cookies()
        opts = CsrfOptions(cookie_options=CookieOptions(secure=False))
        verdict = evaluate("POST", _cookie_header(cookies), opts)

        assert isinstance(verdict, Accepted)
        name, value = _set_cookie_value(verdict.set_cookie)
        assert name == "XSRF-TOKEN"
        assert value == verdict.token
        assert value != cookies["XSRF-TOKEN"]
        assert "csrfSecret" not in verdict.set_cookie
        assert TOKENS.verify(cookies["csrfSecret"], value)

    def test_rotated_token_is_signed(self) -> None:
        cookies = _valid_cookies("k")
        verdict = evaluate("POST", _cookie_header(cookies), CsrfOptions(secret="k"))
        assert isinstance(verdict, Accepted)
        follow_up = cookies | {"XSRF-TOKEN": verdict.token}
        assert isinstance(evaluate("POST", _cookie_header(follow_up), CsrfOptions(secret="k")), Accepted)

    def test_consecutive_validations_never_reuse_token(self) -> None:
        cookies = _valid_cookies()
        first = evaluate("POST", _cookie_header(cookies), CsrfOptions())
        second = evaluate("POST", _cookie_header(cookies), CsrfOptions())
        assert isinstance(first, Accepted)
        assert isinstance(second, Accepted)
        assert first.token != second.token

    def test_old_token_still_valid_after_rotation(self) -> None:
        cookies = _valid_cookies()
        evaluate("POST", _cookie_header(cookies), CsrfOptions())
        assert isinstance(evaluate("POST", _cookie_header(cookies), CsrfOptions()), Accepted)

    def test_rotated_cookie_uses_cookie_options(self) -> None:
        opts = CsrfOptions(cookie_options=CookieOptions(secure=True, same_site="strict"))
        verdict = evaluate("POST", _cookie_header(_valid_cookies()), opts)
        assert isinstance(verdict, Accepted)
        assert "Secure" in verdict.set_cookie
        assert "SameSite=strict" in verdict.set_cookie
        assert parse_cookie_header(verdict.set_cookie.split(";", 1)[0])["XSRF-TOKEN"] == verdict.token


# ---------------------------------------------------------------------------
# Internal errors
# ---------------------------------------------------------------------------


class TestInternalErrors:
    def test_unexpected_exception_is_500_with_message(self) -> None:
        tokens = _ExplodingTokens(RuntimeError("hash backend unavailable"))
        verdict = evaluate("POST", _cookie_header(_valid_cookies()), CsrfOptions(), tokens)
        assert verdict == Rejected(500, "hash backend unavailable")

    def test_unexpected_exception_without_message(self) -> None:
        tokens = _ExplodingTokens(RuntimeError())
        verdict = evaluate("POST", _cookie_header(_valid_cookies()), CsrfOptions(), tokens)
        assert verdict == Rejected(500, INTERNAL_ERROR_MESSAGE)
        assert INTERNAL_ERROR_MESSAGE == "Internal Server Error"

    def test_exception_status_is_honoured(self) -> None:
        tokens = _ExplodingTokens(_StatusError("teapot"))
        verdict = evaluate("POST", _cookie_header(_valid_cookies()), CsrfOptions(), tokens)
        assert verdict == Rejected(418, "teapot")


class TestSideEffects:
    def test_rejection_emits_no_log_events(self) -> None:
        with capture_logs() as logs:
            verdict = evaluate("POST", None, CsrfOptions())
        assert isinstance(verdict, Rejected)
        assert logs == []

    def test_internal_error_emits_no_log_events(self) -> None:
        tokens = _ExplodingTokens(RuntimeError("hash backend unavailable"))
        with capture_logs() as logs:
            evaluate("POST", _cookie_header(_valid_cookies()), CsrfOptions(), tokens)
        assert logs == []
