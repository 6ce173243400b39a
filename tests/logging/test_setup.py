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
"""Tests for configure_logging."""

import logging
from pathlib import Path
from typing import Any

from kfk.core.config import Config
from kfk.logging import LoggingPort, StructlogAdapter, configure_logging


class RecordingLogging:
    def __init__(self) -> None:
        self.configured: list[Config] = []

    def configure(self, config: Config) -> None:
        self.configured.append(config)

    def get_logger(self, name: str) -> Any:
        return logging.getLogger(name)

    def set_level(self, name: str, level: str) -> None:
        pass


class TestConfigureLogging:
    def test_defaults_to_structlog_adapter(self):
        adapter = configure_logging()
        assert isinstance(adapter, StructlogAdapter)
        assert isinstance(adapter, LoggingPort)
        assert logging.getLogger().level == logging.INFO

    def test_uses_given_config(self):
        configure_logging(Config({"kfk": {"logging": {"level": {"root": "WARNING", "kfk.consumer": "DEBUG"}}}}))
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("kfk.consumer").level == logging.DEBUG

    def test_loads_config_from_file(self, tmp_path: Path):
        config_file = tmp_path / "kfk.yaml"
        config_file.write_text("kfk:\n  logging:\n    format: json\n")

        adapter = configure_logging(config_file)

        assert isinstance(adapter, StructlogAdapter)
        assert adapter._format == "json"

    def test_any_logging_port_can_be_configured(self):
        port = RecordingLogging()
        config = Config({"kfk": {"logging": {"format": "json"}}})

        assert configure_logging(config, adapter=port) is port
        assert port.configured == [config]
        assert isinstance(port, LoggingPort)
