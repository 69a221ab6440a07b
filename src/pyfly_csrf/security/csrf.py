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
"""CSRF token utilities — synchronizer token, double-submit cookie variant.

Binds the token authority and the signing layer together: tokens are derived
from the per-client secret and, when a signing key is configured, signed
before they are written to the token cookie.
"""

from __future__ import annotations

from pyfly_csrf.security.signing import sign, unsign
from pyfly_csrf.security.tokens import TokenAuthority, default_tokens

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SECRET_COOKIE_NAME: str = "csrfSecret"
"""Name of the cookie that carries the per-client secret (never signed)."""

CSRF_COOKIE_NAME: str = "XSRF-TOKEN"
"""Default name of the cookie that carries the CSRF token."""

CSRF_ERROR_MESSAGE: str = "Invalid CSRF token"
"""Default message returned in the body of a rejected request."""

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})
"""HTTP methods that do not require CSRF validation by default."""


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------
def issue_token(
    secret: str,
    signing_key: str | None = None,
    tokens: TokenAuthority = default_tokens,
) -> str:
    """Derive a fresh token from *secret*, signed when *signing_key* is set.

    Returns:
        The value to store in the token cookie.
    """
    token = tokens.create(secret)
    if signing_key is not None:
        return sign(token, signing_key)
    return token


def read_token(cookie_value: str, signing_key: str | None = None) -> str | None:
    """Recover the raw token from a token cookie value.

    Returns:
        The token, or ``None`` if the value is signed with a different key
        or has been tampered with. Unsigned configurations return the value
        unchanged.
    """
    if signing_key is None:
        return cookie_value
    return unsign(cookie_value, signing_key)
