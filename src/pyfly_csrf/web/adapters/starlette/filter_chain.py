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
"""WebFilterChainMiddleware — runs WebFilters around an ASGI app."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, cast

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pyfly_csrf.web.filters import CallNext, WebFilter


async def _buffered_response(app: ASGIApp, scope: Scope, receive: Receive) -> Response:
    """Run *app* and collect what it sends into a :class:`Response`."""
    status_code = 200
    raw_headers: list[tuple[bytes, bytes]] = []
    body = bytearray()

    async def collect(message: Message) -> None:
        nonlocal status_code, raw_headers
        if message["type"] == "http.response.start":
            status_code = message["status"]
            raw_headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            body.extend(message.get("body", b""))

    await app(scope, receive, collect)

    response = Response(content=bytes(body), status_code=status_code)
    response.raw_headers[:] = raw_headers
    return response


class WebFilterChainMiddleware:
    """Pure ASGI middleware executing :class:`WebFilter` instances in list order.

    The downstream response is buffered so filters can append headers such
    as ``Set-Cookie`` after the handler has run. Non-HTTP scopes bypass the
    chain.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters = list(filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def endpoint(request: Any) -> Response:
            return await _buffered_response(self.app, scope, receive)

        chain: CallNext = endpoint
        for web_filter in reversed(self._filters):
            chain = _link(web_filter, chain)

        response = cast(Response, await chain(Request(scope, receive, send)))
        await response(scope, receive, send)


def _link(web_filter: WebFilter, next_call: CallNext) -> CallNext:
    async def step(request: Request) -> Response:
        if web_filter.should_not_filter(request):
            return cast(Response, await next_call(request))
        return cast(Response, await web_filter.do_filter(request, next_call))

    return step
