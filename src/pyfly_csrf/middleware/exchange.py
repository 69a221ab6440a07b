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
"""Call-shape normalization for wrapped handlers.

Handlers are invoked either as ``handler(request, response)`` or with a
single context object exposing both (``ctx.request``/``ctx.response``, or
the shorter ``ctx.req``/``ctx.res``). Both shapes collapse into one
:class:`HttpExchange` before any CSRF logic runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_MISSING = object()


@dataclass(frozen=True)
class HttpExchange:
    """The request/response pair a middleware operates on."""

    request: Any
    response: Any


def _attr(obj: Any, *names: str) -> Any:
    for name in names:
        value = getattr(obj, name, _MISSING)
        if value is not _MISSING:
            return value
    return _MISSING


def normalize_exchange(args: tuple[Any, ...]) -> HttpExchange:
    """Build an :class:`HttpExchange` from positional handler arguments.

    Raises:
        TypeError: If *args* is neither a ``(request, response)`` pair nor a
            single context object exposing both.
    """
    if len(args) > 1:
        return HttpExchange(request=args[0], response=args[1])

    if len(args) == 1:
        context = args[0]
        request = _attr(context, "request", "req")
        response = _attr(context, "response", "res")
        if request is not _MISSING and response is not _MISSING:
            return HttpExchange(request=request, response=response)

    raise TypeError(
        "CSRF middleware expects (request, response) or a context object with request and response"
    )
