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
"""Signing layer — tamper-evident token cookie values.

Thin functional wrapper over :class:`itsdangerous.Signer`. A signed value is
``<value>.<tag>``; the ``.`` separator and the URL-safe base64 tag are both
legal inside a cookie value.
"""

from __future__ import annotations

import hashlib
from typing import Any

from itsdangerous import BadSignature, Signer

SIGNING_SALT: str = "pyfly_csrf.token"
"""Namespaces the derived HMAC key so it is not reused by other signers."""

SEPARATOR: str = "."


def _signer(key: str) -> Signer:
    return Signer(
        key,
        salt=SIGNING_SALT,
        sep=SEPARATOR,
        key_derivation="hmac",
        digest_method=hashlib.sha256,
    )


def sign(value: str, key: str) -> str:
    """Append an HMAC-SHA256 tag to *value*.

    Args:
        value: The token to sign.
        key: The server-held signing key.

    Returns:
        ``"<value>.<tag>"``.
    """
    return _signer(key).sign(value).decode("utf-8")


def unsign(signed_value: Any, key: str) -> str | None:
    """Return the original value if the tag on *signed_value* matches.

    Returns:
        The unsigned value, or ``None`` for a wrong key, truncated or altered
        input, or anything that is not a string.
    """
    if not isinstance(signed_value, str) or SEPARATOR not in signed_value:
        return None
    try:
        return _signer(key).unsign(signed_value).decode("utf-8")
    except BadSignature:
        return None
