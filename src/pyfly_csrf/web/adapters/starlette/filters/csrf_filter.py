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
"""CsrfSetupFilter and CsrfFilter — synchronizer token CSRF protection.

* :class:`CsrfSetupFilter` lets the request through and issues the
  ``csrfSecret`` and token cookies on the response. Mount it on the pages
  that render forms (``url_patterns``).
* :class:`CsrfFilter` validates the token cookie against the secret cookie
  for every non-exempt method. A failed check short-circuits with a JSON
  ``{"message": ...}`` response; a passing check rotates the token cookie.

.. _synchronizer token:
   https://cheatsheetseries.owasp.org/cheatsheets/Cross-Site_Request_Forgery_Prevention_Cheat_Sheet.html#synchronizer-token-pattern
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.middleware.validation import Accepted, Rejected, evaluate
from pyfly_csrf.security.csrf import SECRET_COOKIE_NAME, issue_token
from pyfly_csrf.security.tokens import TokenAuthority, default_tokens
from pyfly_csrf.web.cookies import serialize_cookie
from pyfly_csrf.web.filters import CallNext, OncePerRequestFilter

logger = structlog.get_logger("pyfly_csrf.web")


class CsrfSetupFilter(OncePerRequestFilter):
    """Issues CSRF cookies on every filtered response.

    An existing ``csrfSecret`` cookie is preserved; only the token is
    refreshed.
    """

    def __init__(
        self,
        options: CsrfOptions | None = None,
        tokens: TokenAuthority = default_tokens,
        url_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
    ) -> None:
        self._options = options or CsrfOptions()
        self._tokens = tokens
        self.configure_patterns(url_patterns, exclude_patterns)

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        opts = self._options
        secret = request.cookies.get(SECRET_COOKIE_NAME) or self._tokens.create_secret()
        token = issue_token(secret, opts.secret, self._tokens)

        response: Response = await call_next(request)
        response.headers.append(
            "set-cookie", serialize_cookie(SECRET_COOKIE_NAME, secret, opts.cookie_options)
        )
        response.headers.append(
            "set-cookie", serialize_cookie(opts.token_key, token, opts.cookie_options)
        )
        return response


class CsrfFilter(OncePerRequestFilter):
    """Validates and rotates the CSRF token cookie.

    Every path is checked unless ``exclude_patterns`` names it.
    """

    def __init__(
        self,
        options: CsrfOptions | None = None,
        tokens: TokenAuthority = default_tokens,
        url_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
    ) -> None:
        self._options = options or CsrfOptions()
        self._tokens = tokens
        self.configure_patterns(url_patterns, exclude_patterns)

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        verdict = evaluate(
            request.method,
            request.headers.get("cookie"),
            self._options,
            self._tokens,
        )

        if isinstance(verdict, Rejected):
            log = logger.warning if verdict.code is None else logger.info
            log(
                "csrf_request_rejected",
                method=request.method,
                path=request.url.path,
                status_code=verdict.status,
                code=verdict.code,
            )
            return JSONResponse(verdict.body, status_code=verdict.status)

        response: Response = await call_next(request)
        if isinstance(verdict, Accepted):
            response.headers.append("set-cookie", verdict.set_cookie)
        return response
