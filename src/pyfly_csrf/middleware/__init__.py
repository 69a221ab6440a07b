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
"""PyFly CSRF Middleware — setup and validation stages."""

from pyfly_csrf.middleware.csrf import csrf, evaluate_request
from pyfly_csrf.middleware.exchange import HttpExchange, normalize_exchange
from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.middleware.ports import Handler, HttpRequest, HttpResponse
from pyfly_csrf.middleware.setup import setup
from pyfly_csrf.middleware.validation import Accepted, Exempt, Rejected, Verdict, evaluate

__all__ = [
    "Accepted",
    "CsrfOptions",
    "Exempt",
    "Handler",
    "HttpExchange",
    "HttpRequest",
    "HttpResponse",
    "Rejected",
    "Verdict",
    "csrf",
    "evaluate",
    "evaluate_request",
    "normalize_exchange",
    "setup",
]
