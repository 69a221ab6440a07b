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
"""Request validation as a pure decision.

:func:`evaluate` walks the validation states for one request and returns a
verdict instead of writing to a response:

``METHOD_CHECK -> COOKIE_PRESENCE_CHECK -> TOKEN_EXTRACTION ->
SIGNATURE_CHECK -> VERIFY -> ROTATE``

Every check can end in :class:`Rejected`. Writing the verdict to an actual
HTTP response is left to the caller (see :mod:`pyfly_csrf.middleware.csrf`
and the Starlette filters).
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from pyfly_csrf.kernel.exceptions import (
    CookieHeaderMissingError,
    HttpError,
    MethodUnreadableError,
    SecretCookieMissingError,
    SignatureInvalidError,
    TokenCookieMissingError,
    TokenSecretMismatchError,
)
from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.security.csrf import SECRET_COOKIE_NAME, issue_token, read_token
from pyfly_csrf.security.tokens import TokenAuthority, default_tokens
from pyfly_csrf.web.cookies import parse_cookie_header, serialize_cookie

INTERNAL_ERROR_MESSAGE: str = HTTPStatus.INTERNAL_SERVER_ERROR.phrase


@dataclass(frozen=True)
class Exempt:
    """The method is exempt; call the handler without touching cookies."""


@dataclass(frozen=True)
class Accepted:
    """The token verified. ``set_cookie`` carries the rotated token cookie."""

    token: str
    set_cookie: str


@dataclass(frozen=True)
class Rejected:
    """The request must not reach the handler."""

    status: int
    message: str
    code: str | None = None

    @property
    def body(self) -> dict[str, str]:
        return {"message": self.message}


Verdict = Exempt | Accepted | Rejected


def evaluate(
    method: Any,
    cookie_header: str | None,
    options: CsrfOptions,
    tokens: TokenAuthority = default_tokens,
) -> Verdict:
    """Decide what to do with a request.

    Args:
        method: The request method as exposed by the framework.
        cookie_header: The raw ``Cookie`` header, or ``None`` if absent.
        options: Middleware configuration.
        tokens: Token authority used to verify and rotate.

    Returns:
        :class:`Exempt`, :class:`Accepted` or :class:`Rejected`. Never raises
        and never logs; callers report rejections.
    """
    try:
        return _walk(method, cookie_header, options, tokens)
    except HttpError as exc:
        return Rejected(status=exc.status, message=exc.message, code=exc.code)
    except Exception as exc:
        status = getattr(exc, "status", None)
        if not isinstance(status, int):
            status = HTTPStatus.INTERNAL_SERVER_ERROR
        return Rejected(status=int(status), message=str(exc) or INTERNAL_ERROR_MESSAGE)


def _walk(
    method: Any,
    cookie_header: str | None,
    options: CsrfOptions,
    tokens: TokenAuthority,
) -> Exempt | Accepted:
    message = options.error_message

    if not isinstance(method, str):
        raise MethodUnreadableError(message)

    if method in options.ignored_methods:
        return Exempt()

    if cookie_header is None:
        raise CookieHeaderMissingError(message)

    cookies = parse_cookie_header(cookie_header)
    token = cookies.get(options.token_key)
    secret = cookies.get(SECRET_COOKIE_NAME)

    if not token:
        raise TokenCookieMissingError(message)
    if not secret:
        raise SecretCookieMissingError(message)

    unsigned = read_token(token, options.secret)
    if unsigned is None:
        raise SignatureInvalidError(message)

    if not tokens.verify(secret, unsigned):
        raise TokenSecretMismatchError(message)

    rotated = issue_token(secret, options.secret, tokens)
    return Accepted(
        token=rotated,
        set_cookie=serialize_cookie(options.token_key, rotated, options.cookie_options),
    )
