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
"""One-call logging setup for applications embedding kfk."""

from __future__ import annotations

from pathlib import Path

from kfk.core.config import Config
from kfk.logging.port import LoggingPort
from kfk.logging.structlog_adapter import StructlogAdapter


def configure_logging(
    config: Config | str | Path | None = None,
    adapter: LoggingPort | None = None,
) -> LoggingPort:
    """Configure process-wide logging from ``kfk.logging.*`` and return the adapter.

    *config* may be a loaded :class:`Config` or a path to a YAML/TOML file;
    without one, only ``KFK_LOGGING_*`` environment overrides apply.
    *adapter* defaults to :class:`StructlogAdapter`.
    """
    if config is None:
        config = Config({})
    elif not isinstance(config, Config):
        config = Config.from_file(config)
    adapter = adapter or StructlogAdapter()
    adapter.configure(config)
    return adapter
