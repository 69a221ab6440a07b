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
"""Request filters — the ``WebFilter`` protocol and a path-matching base class.

Filters see the framework's request object only through attributes
(``request.url.path``), so nothing here imports Starlette.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Coroutine, Sequence
from fnmatch import fnmatch
from typing import Any, Protocol, runtime_checkable

# ``await call_next(request)`` runs the rest of the chain and yields its response.
CallNext = Callable[..., Coroutine[Any, Any, Any]]


@runtime_checkable
class WebFilter(Protocol):
    """A filter in a ``WebFilterChainMiddleware`` chain."""

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Handle *request*, delegating to *call_next* to continue the chain."""
        ...

    def should_not_filter(self, request: Any) -> bool:
        """Return ``True`` to skip this filter for *request*."""
        ...


class OncePerRequestFilter(abc.ABC):
    """Base :class:`WebFilter` with glob matching on the request path.

    Attributes:
        url_patterns: Paths this filter applies to. Empty means every path.
        exclude_patterns: Paths skipped even when ``url_patterns`` matches.
    """

    url_patterns: Sequence[str] = ()
    exclude_patterns: Sequence[str] = ()

    def configure_patterns(
        self,
        url_patterns: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
    ) -> None:
        """Override the class-level patterns for this instance."""
        if url_patterns is not None:
            self.url_patterns = list(url_patterns)
        if exclude_patterns is not None:
            self.exclude_patterns = list(exclude_patterns)

    def should_not_filter(self, request: Any) -> bool:
        path: str = request.url.path
        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return True
        return any(fnmatch(path, p) for p in self.exclude_patterns)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Filter logic. Call ``await call_next(request)`` to continue."""
        ...
