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
"""Framework boundary protocols.

Uses generic ``Any`` types for headers and bodies so that vendor-specific
types remain confined to the adapter layer.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

# A wrapped handler may be sync or async; the middleware awaits awaitables.
Handler = Callable[..., Any | Awaitable[Any]]


@runtime_checkable
class HttpRequest(Protocol):
    """What the middleware reads from an incoming request."""

    method: Any
    headers: Any


@runtime_checkable
class HttpResponse(Protocol):
    """What the middleware writes to an outgoing response."""

    def set_header(self, name: str, value: str | list[str]) -> Any:
        """Set (replace) a header with one or more values."""
        ...

    def status(self, code: int) -> HttpResponse:
        """Set the status code. Returns the response for chaining."""
        ...

    def json(self, body: Any) -> Any:
        """Write *body* as a JSON response."""
        ...
