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
"""CSRF validation middleware.

Runs :func:`~pyfly_csrf.middleware.validation.evaluate` for every request
and applies the verdict to the response:

* :class:`Exempt` — the handler runs unchanged.
* :class:`Accepted` — the rotated token cookie is set, then the handler runs.
* :class:`Rejected` — ``response.status(...).json({"message": ...})``; the
  handler never runs.

Errors raised by the handler itself are not intercepted.

.. seealso::
   https://cheatsheetseries.owasp.org/cheatsheets/Cross-Site_Request_Forgery_Prevention_Cheat_Sheet.html#synchronizer-token-pattern
"""

from __future__ import annotations

import functools
from typing import Any

import structlog

from pyfly_csrf.middleware.exchange import normalize_exchange
from pyfly_csrf.middleware.invocation import invoke, resolve_options
from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.middleware.ports import Handler
from pyfly_csrf.middleware.validation import Accepted, Rejected, Verdict, evaluate
from pyfly_csrf.security.tokens import TokenAuthority, default_tokens
from pyfly_csrf.web.cookies import read_cookie_header

logger = structlog.get_logger("pyfly_csrf.middleware")


def evaluate_request(
    request: Any,
    options: CsrfOptions,
    tokens: TokenAuthority = default_tokens,
) -> Verdict:
    """Run :func:`evaluate` against a framework request object."""
    return evaluate(
        getattr(request, "method", None),
        read_cookie_header(getattr(request, "headers", None)),
        options,
        tokens,
    )


def csrf(
    handler: Handler,
    options: CsrfOptions | None = None,
    *,
    tokens: TokenAuthority = default_tokens,
    **overrides: Any,
) -> Handler:
    """Wrap *handler* with CSRF token validation and rotation.

    Args:
        handler: Sync or async handler taking ``(request, response)`` or a
            single context object.
        options: Middleware configuration. Alternatively pass
            :class:`CsrfOptions` fields as keyword arguments.
        tokens: Token authority used to verify and rotate tokens.

    Returns:
        An async wrapper. It returns the handler's result, or ``None`` when
        the request is rejected.
    """
    opts = resolve_options(options, overrides)

    @functools.wraps(handler)
    async def wrapper(*args: Any) -> Any:
        exchange = normalize_exchange(args)
        verdict = evaluate_request(exchange.request, opts, tokens)

        if isinstance(verdict, Rejected):
            if verdict.code is None:
                logger.warning("csrf_validation_error", status=verdict.status, error=verdict.message)
            else:
                logger.debug("csrf_rejected", code=verdict.code, status=verdict.status)
            exchange.response.status(verdict.status).json(verdict.body)
            return None

        if isinstance(verdict, Accepted):
            exchange.response.set_header("Set-Cookie", verdict.set_cookie)

        return await invoke(handler, args)

    return wrapper
