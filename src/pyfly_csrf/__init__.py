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
"""PyFly CSRF — stateless CSRF protection for request handlers.

Synchronizer token pattern with a double-submit cookie: ``setup`` issues a
per-client secret and a derived (optionally signed) token as cookies, and
``csrf`` verifies the token against the secret on every unsafe request,
rotating the token when it passes.
"""

from pyfly_csrf.kernel.exceptions import HttpError
from pyfly_csrf.middleware import CsrfOptions, csrf, setup
from pyfly_csrf.protection import CsrfProtection, csrf_protection
from pyfly_csrf.web.cookies import CookieOptions

__version__ = "0.1.0"

__all__ = [
    "CookieOptions",
    "CsrfOptions",
    "CsrfProtection",
    "HttpError",
    "csrf",
    "csrf_protection",
    "setup",
]
