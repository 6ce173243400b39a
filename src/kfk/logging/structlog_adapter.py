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
"""StructlogAdapter: LoggingPort implementation backed by structlog.

Configuration keys::

    kfk:
      logging:
        format: console        # or "json"
        level:
          root: INFO
          kfk.consumer: DEBUG  # per-logger overrides
          aiokafka: WARNING
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from kfk.core.config import Config

_FORMATS = ("console", "json")


def _level_value(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


class StructlogAdapter:
    """Routes stdlib logging (used by every kfk module) through structlog renderers."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Read ``kfk.logging.*`` and install processors and levels."""
        level_section = dict(config.get_section("kfk.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}

        fmt = str(config.get("kfk.logging.format", "console")).lower()
        if fmt not in _FORMATS:
            raise ValueError(f"Unsupported log format '{fmt}', expected one of {_FORMATS}")
        self._format = fmt

        self._setup_structlog()
        for module, level in self._module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(_level_value(level))

    def _setup_structlog(self) -> None:
        shared: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]
        rendering: list[structlog.types.Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
        if self._format == "json":
            rendering += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        else:
            rendering.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        # stdlib records from kfk and aiokafka get the same rendering
        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=rendering,
        )
        handler = logging.StreamHandler(self._stream or sys.stdout)
        handler.setFormatter(formatter)

        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(_level_value(self._root_level))
