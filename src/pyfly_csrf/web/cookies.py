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
"""Cookie attributes, ``Set-Cookie`` serialization and cookie header parsing."""

from __future__ import annotations

import http.cookies
import os
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import format_datetime
from typing import Any

from starlette.requests import cookie_parser

_PRODUCTION_PROFILES = frozenset({"prod", "production"})
_SAME_SITE_VALUES = ("strict", "lax", "none")


def is_production() -> bool:
    """Return ``True`` when ``PYFLY_PROFILES_ACTIVE`` names a production profile."""
    active = os.environ.get("PYFLY_PROFILES_ACTIVE", "")
    profiles = {p.strip().lower() for p in active.split(",") if p.strip()}
    return bool(profiles & _PRODUCTION_PROFILES)


@dataclass(frozen=True)
class CookieOptions:
    """Attributes applied to every CSRF cookie.

    ``secure`` defaults to the production flag, so local HTTP development
    keeps working while production cookies never travel in clear text.
    """

    http_only: bool = True
    path: str | None = "/"
    same_site: str | None = "lax"
    secure: bool = field(default_factory=is_production)
    domain: str | None = None
    max_age: int | None = None
    expires: datetime | str | None = None

    def __post_init__(self) -> None:
        if self.same_site is not None and not isinstance(self.same_site, str):
            raise TypeError(f"same_site must be a string or None, got {type(self.same_site).__name__}")
        if self.same_site is not None and self.same_site.lower() not in _SAME_SITE_VALUES:
            raise ValueError(f"same_site must be one of {_SAME_SITE_VALUES}, got {self.same_site!r}")


def serialize_cookie(name: str, value: str, options: CookieOptions | None = None) -> str:
    """Render a single ``Set-Cookie`` header value.

    Mirrors ``starlette.responses.Response.set_cookie`` so cookies written by
    the framework-neutral middleware and by the Starlette filters are
    byte-identical.
    """
    opts = options or CookieOptions()
    cookie: http.cookies.BaseCookie[str] = http.cookies.SimpleCookie()
    cookie[name] = value
    morsel = cookie[name]
    if opts.max_age is not None:
        morsel["max-age"] = opts.max_age
    if opts.expires is not None:
        if isinstance(opts.expires, datetime):
            morsel["expires"] = format_datetime(opts.expires, usegmt=True)
        else:
            morsel["expires"] = opts.expires
    if opts.path is not None:
        morsel["path"] = opts.path
    if opts.domain is not None:
        morsel["domain"] = opts.domain
    if opts.secure:
        morsel["secure"] = True
    if opts.http_only:
        morsel["httponly"] = True
    if opts.same_site is not None:
        morsel["samesite"] = opts.same_site
    return cookie.output(header="").strip()


def parse_cookie_header(cookie_header: str) -> dict[str, str]:
    """Parse a raw ``Cookie`` request header into a name/value dict."""
    return cookie_parser(cookie_header)


def read_cookie_header(headers: Any) -> str | None:
    """Return the raw cookie header from a headers mapping, or ``None``.

    Starlette headers are case-insensitive; plain dicts are checked for both
    ``cookie`` and ``Cookie``.
    """
    if headers is None or not hasattr(headers, "get"):
        return None
    value = headers.get("cookie")
    if value is None:
        value = headers.get("Cookie")
    return value if isinstance(value, str) else None


def get_cookie(headers: Any, name: str) -> str | None:
    """Return the value of cookie *name* from *headers*, or ``None`` if absent."""
    raw = read_cookie_header(headers)
    if raw is None:
        return None
    return parse_cookie_header(raw).get(name)
