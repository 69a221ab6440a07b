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
"""Logging setup for the CSRF middleware and filters.

The validation wrapper logs through ``pyfly_csrf.middleware`` and the
Starlette filters through ``pyfly_csrf.web``. :func:`configure_logging`
routes both through stdlib logging with structlog, driven by the
``pyfly.logging`` section::

    pyfly:
      logging:
        format: json
        level:
          root: INFO
          pyfly_csrf.middleware: DEBUG
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from pyfly_csrf.core.config import Config

REDACTED = "***"

SENSITIVE_KEYS: frozenset[str] = frozenset({"secret", "csrf_secret", "token", "set_cookie", "cookie"})
"""Event keys whose values must never reach a log sink."""

LOG_FORMATS = ("console", "json")


def redact_csrf_values(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor that masks CSRF secrets, tokens and cookies."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def build_processors(log_format: str = "console") -> list[structlog.types.Processor]:
    """Return the processor chain, ending in a console or JSON renderer.

    Raises:
        ValueError: If *log_format* is not ``console`` or ``json``.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"pyfly.logging.format must be one of {LOG_FORMATS}, got {log_format!r}")
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_csrf_values,
        structlog.processors.TimeStamper(fmt="iso"),
        renderer,
    ]


def configure_logging(config: Config) -> bool:
    """Configure structlog from ``pyfly.logging``.

    ``level`` is either a single level for the root logger or a mapping of
    logger names (``root`` included) to levels.

    Returns:
        ``False`` without touching any logging state when the section is
        absent, ``True`` once logging is configured.
    """
    section = config.get_section("pyfly.logging")
    if not section:
        return False

    raw_levels = section.get("level") or {}
    if not isinstance(raw_levels, dict):
        raw_levels = {"root": raw_levels}
    levels = {name: _level(value) for name, value in raw_levels.items()}
    root_level = levels.pop("root", logging.INFO)
    log_format = str(config.get("pyfly.logging.format", "console")).lower()

    structlog.configure(
        processors=build_processors(log_format),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=root_level, force=True)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
    return True


def _level(value: Any) -> int:
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {value!r}")
    return level
