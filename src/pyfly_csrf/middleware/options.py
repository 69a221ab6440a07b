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
"""Middleware configuration record."""

from __future__ import annotations

from dataclasses import dataclass, field

from pyfly_csrf.security.csrf import CSRF_COOKIE_NAME, CSRF_ERROR_MESSAGE, SAFE_METHODS
from pyfly_csrf.web.cookies import CookieOptions


@dataclass(frozen=True)
class CsrfOptions:
    """Immutable per-instance configuration shared by every request.

    Attributes:
        secret: Signing key for the token cookie. ``None`` leaves tokens unsigned.
        token_key: Name of the token cookie.
        error_message: Message written to the body of rejected requests.
        ignored_methods: HTTP methods exempt from validation.
        cookie_options: Attributes applied to both CSRF cookies.
    """

    secret: str | None = None
    token_key: str = CSRF_COOKIE_NAME
    error_message: str = CSRF_ERROR_MESSAGE
    ignored_methods: frozenset[str] = SAFE_METHODS
    cookie_options: CookieOptions = field(default_factory=CookieOptions)

    def __post_init__(self) -> None:
        if not isinstance(self.token_key, str) or not self.token_key:
            raise ValueError("token_key must be a non-empty string")
        if isinstance(self.ignored_methods, str):
            raise TypeError("ignored_methods must be a collection of method names, not a string")
        # Accept any iterable at construction, store a frozenset.
        object.__setattr__(self, "ignored_methods", frozenset(self.ignored_methods))

    @property
    def signed(self) -> bool:
        return self.secret is not None
