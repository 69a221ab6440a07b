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
"""PyFly CSRF Security — token authority, signing, and CSRF token helpers."""

from pyfly_csrf.security.csrf import (
    CSRF_COOKIE_NAME,
    CSRF_ERROR_MESSAGE,
    SAFE_METHODS,
    SECRET_COOKIE_NAME,
    issue_token,
    read_token,
)
from pyfly_csrf.security.signing import sign, unsign
from pyfly_csrf.security.tokens import TokenAuthority, Tokens, default_tokens

__all__ = [
    "CSRF_COOKIE_NAME",
    "CSRF_ERROR_MESSAGE",
    "SAFE_METHODS",
    "SECRET_COOKIE_NAME",
    "TokenAuthority",
    "Tokens",
    "default_tokens",
    "issue_token",
    "read_token",
    "sign",
    "unsign",
]
