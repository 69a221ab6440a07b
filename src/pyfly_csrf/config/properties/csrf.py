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
"""CSRF subsystem configuration properties."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pyfly_csrf.core.config import config_properties
from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.security.csrf import CSRF_COOKIE_NAME, CSRF_ERROR_MESSAGE, SAFE_METHODS
from pyfly_csrf.web.cookies import CookieOptions


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


@config_properties(prefix="pyfly.csrf")
@dataclass
class CsrfProperties:
    """Configuration for CSRF protection (pyfly.csrf.*).

    Example ``pyfly.yaml``::

        pyfly:
          csrf:
            secret: ${CSRF_SIGNING_KEY}
            token-key: XSRF-TOKEN
            ignored-methods: [GET, HEAD, OPTIONS]
            cookie:
              same-site: strict
              secure: true
    """

    secret: str | None = None
    token_key: str = CSRF_COOKIE_NAME
    error_message: str = CSRF_ERROR_MESSAGE
    ignored_methods: list[str] = field(default_factory=lambda: sorted(SAFE_METHODS))
    cookie: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.cookie, Mapping):
            raise TypeError(
                f"pyfly.csrf.cookie must be a mapping of cookie attributes, got {type(self.cookie).__name__}"
            )

    def cookie_options(self) -> CookieOptions:
        """Build :class:`CookieOptions`, falling back to defaults for missing keys."""
        raw = {key.replace("-", "_"): value for key, value in self.cookie.items()}
        kwargs: dict[str, Any] = {}
        for name in ("http_only", "secure"):
            if name in raw:
                kwargs[name] = _flag(raw[name])
        for name in ("path", "same_site", "domain", "expires"):
            if name in raw:
                kwargs[name] = raw[name]
        if raw.get("max_age") is not None:
            kwargs["max_age"] = int(raw["max_age"])
        return CookieOptions(**kwargs)

    def to_options(self) -> CsrfOptions:
        """Convert to the immutable middleware configuration."""
        return CsrfOptions(
            secret=self.secret or None,
            token_key=self.token_key,
            error_message=self.error_message,
            ignored_methods=frozenset(self.ignored_methods),
            cookie_options=self.cookie_options(),
        )
