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
"""Option resolution and handler invocation shared by the middleware."""

from __future__ import annotations

import inspect
from typing import Any

from pyfly_csrf.middleware.options import CsrfOptions
from pyfly_csrf.middleware.ports import Handler


def resolve_options(options: CsrfOptions | None, overrides: dict[str, Any]) -> CsrfOptions:
    """Return *options*, or build one from keyword *overrides*."""
    if options is not None and overrides:
        raise TypeError("pass either a CsrfOptions instance or keyword options, not both")
    if options is not None:
        return options
    return CsrfOptions(**overrides)


async def invoke(handler: Handler, args: tuple[Any, ...]) -> Any:
    """Call *handler* with *args*, awaiting the result if it is awaitable."""
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
