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
"""CSRF protection factory.

Builds one immutable :class:`CsrfOptions` from user options merged over the
defaults, and hands out ``setup`` and ``csrf`` decorators bound to it::

    protection = csrf_protection(secret=os.environ["CSRF_SIGNING_KEY"])

    @protection.setup
    async def login_page(request, response):
        ...

    @protection.csrf
    async def update_profile(request, response):
        ...
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from pyfly_csrf.config.properties.csrf import CsrfProperties
from pyfly_csrf.core.config import Config
from pyfly_csrf.logging.configuration import configure_logging
from pyfly_csrf.middleware.csrf import csrf as _csrf
from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.middleware.ports import Handler
from pyfly_csrf.middleware.setup import setup as _setup
from pyfly_csrf.security.csrf import CSRF_COOKIE_NAME, CSRF_ERROR_MESSAGE, SAFE_METHODS
from pyfly_csrf.security.tokens import TokenAuthority, default_tokens
from pyfly_csrf.web.cookies import CookieOptions


@dataclass(frozen=True)
class CsrfProtection:
    """A configured pair of CSRF middleware decorators."""

    options: CsrfOptions = field(default_factory=CsrfOptions)
    tokens: TokenAuthority = default_tokens

    def setup(self, handler: Handler) -> Handler:
        """Wrap *handler* with the setup stage (issues both cookies)."""
        return _setup(handler, self.options, tokens=self.tokens)

    def csrf(self, handler: Handler) -> Handler:
        """Wrap *handler* with the validation stage."""
        return _csrf(handler, self.options, tokens=self.tokens)

    @classmethod
    def from_config(cls, config: Config, tokens: TokenAuthority = default_tokens) -> CsrfProtection:
        """Build from the ``pyfly.csrf`` configuration section.

        A ``pyfly.logging`` section, when present, is applied first so
        rejections are logged the way the application asks.
        """
        configure_logging(config)
        return cls(options=config.bind(CsrfProperties).to_options(), tokens=tokens)


def csrf_protection(
    *,
    secret: str | None = None,
    token_key: str = CSRF_COOKIE_NAME,
    error_message: str = CSRF_ERROR_MESSAGE,
    ignored_methods: Iterable[str] = SAFE_METHODS,
    cookie_options: CookieOptions | None = None,
    tokens: TokenAuthority = default_tokens,
) -> CsrfProtection:
    """Create CSRF protection with every option defaulted.

    Args:
        secret: Signing key for the token cookie. Omit for unsigned tokens.
        token_key: Name of the token cookie.
        error_message: Message returned when a request is rejected.
        ignored_methods: HTTP methods exempt from validation.
        cookie_options: Attributes for both cookies.
        tokens: Token authority (defaults to the shared :class:`Tokens`).
    """
    options = CsrfOptions(
        secret=secret,
        token_key=token_key,
        error_message=error_message,
        ignored_methods=frozenset(ignored_methods),
        cookie_options=cookie_options or CookieOptions(),
    )
    return CsrfProtection(options=options, tokens=tokens)
