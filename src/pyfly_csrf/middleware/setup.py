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
"""Setup middleware — issues the CSRF secret and token cookies."""

from __future__ import annotations

import functools
from typing import Any

from pyfly_csrf.middleware.exchange import normalize_exchange
from pyfly_csrf.middleware.invocation import invoke, resolve_options
from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.middleware.ports import Handler
from pyfly_csrf.security.csrf import SECRET_COOKIE_NAME, issue_token
from pyfly_csrf.security.tokens import TokenAuthority, default_tokens
from pyfly_csrf.web.cookies import get_cookie, serialize_cookie


def setup(
    handler: Handler,
    options: CsrfOptions | None = None,
    *,
    tokens: TokenAuthority = default_tokens,
    **overrides: Any,
) -> Handler:
    """Wrap *handler* so every call sets the ``csrfSecret`` and token cookies.

    An existing ``csrfSecret`` cookie is kept, so tokens issued earlier for
    the same client stay valid; only the token cookie is refreshed.

    Args:
        handler: Sync or async handler taking ``(request, response)`` or a
            single context object.
        options: Middleware configuration. Alternatively pass
            :class:`CsrfOptions` fields as keyword arguments.
        tokens: Token authority used to create secrets and tokens.

    Returns:
        An async wrapper that returns whatever *handler* returns.
    """
    opts = resolve_options(options, overrides)

    @functools.wraps(handler)
    async def wrapper(*args: Any) -> Any:
        exchange = normalize_exchange(args)

        headers = getattr(exchange.request, "headers", None)
        secret = get_cookie(headers, SECRET_COOKIE_NAME) or tokens.create_secret()
        token = issue_token(secret, opts.secret, tokens)

        exchange.response.set_header(
            "Set-Cookie",
            [
                serialize_cookie(SECRET_COOKIE_NAME, secret, opts.cookie_options),
                serialize_cookie(opts.token_key, token, opts.cookie_options),
            ],
        )

        return await invoke(handler, args)

    return wrapper
