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
"""Token authority port and salted-hash adapter.

A *secret* is a per-client random value kept in the ``csrfSecret`` cookie.
A *token* is ``<salt>-<digest>`` where ``digest`` hashes the salt together
with the secret. Every call to :meth:`Tokens.create` draws a new salt, so the
same secret yields a different token each time, and all of them verify.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import string
from typing import Any, Protocol, runtime_checkable

_SALT_ALPHABET = string.ascii_letters + string.digits


@runtime_checkable
class TokenAuthority(Protocol):
    """Port for CSRF secret generation and token verification."""

    def create_secret(self) -> str:
        """Return a new cryptographically random secret."""
        ...

    def create(self, secret: str) -> str:
        """Derive a fresh token from *secret*."""
        ...

    def verify(self, secret: str, token: str) -> bool:
        """Return ``True`` if *token* was derived from *secret*."""
        ...


class Tokens:
    """TokenAuthority adapter using ``secrets`` and salted SHA-256.

    Args:
        secret_length: Number of random bytes in a secret (default: 18).
        salt_length: Number of characters in a token salt (default: 8).
    """

    def __init__(self, secret_length: int = 18, salt_length: int = 8) -> None:
        for name, value in (("secret_length", secret_length), ("salt_length", salt_length)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
            if value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value}")
        self._secret_length = secret_length
        self._salt_length = salt_length

    def create_secret(self) -> str:
        """Generate a URL-safe secret from the OS CSPRNG."""
        return secrets.token_urlsafe(self._secret_length)

    def create(self, secret: str) -> str:
        """Create a new token for *secret*.

        Raises:
            TypeError: If *secret* is not a non-empty string.
        """
        if not isinstance(secret, str) or not secret:
            raise TypeError("argument secret is required")
        salt = "".join(secrets.choice(_SALT_ALPHABET) for _ in range(self._salt_length))
        return self._tokenize(secret, salt)

    def verify(self, secret: Any, token: Any) -> bool:
        """Verify *token* against *secret* in constant time.

        Malformed input never raises; it simply fails verification.
        """
        if not isinstance(secret, str) or not secret:
            return False
        if not isinstance(token, str) or not token:
            return False

        salt, sep, _ = token.partition("-")
        if not sep or not salt:
            return False

        expected = self._tokenize(secret, salt)
        return hmac.compare_digest(expected.encode("utf-8"), token.encode("utf-8"))

    @staticmethod
    def _tokenize(secret: str, salt: str) -> str:
        digest = hashlib.sha256(f"{salt}-{secret}".encode()).digest()
        encoded = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
        return f"{salt}-{encoded}"


default_tokens = Tokens()
"""Shared instance used when no custom authority is supplied."""
