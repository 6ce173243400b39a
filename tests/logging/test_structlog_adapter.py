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
"""Tests for StructlogAdapter: default LoggingPort implementation."""

import io
import json
import logging

import pytest

from kfk.core.config import Config
from kfk.logging.port import LoggingPort
from kfk.logging.structlog_adapter import StructlogAdapter


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        adapter = StructlogAdapter()
        assert isinstance(adapter, LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"
        assert logging.getLogger().level == logging.INFO

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        config = Config({"kfk": {"logging": {"level": {"root": "debug"}}}})
        adapter.configure(config)
        assert adapter._root_level == "DEBUG"
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        config = Config({"kfk": {"logging": {"format": "json"}}})
        adapter.configure(config)
        assert adapter._format == "json"

    def test_configure_rejects_unknown_format(self):
        adapter = StructlogAdapter()
        with pytest.raises(ValueError, match="xml"):
            adapter.configure(Config({"kfk": {"logging": {"format": "xml"}}}))

    def test_format_overridden_by_env(self, monkeypatch):
        monkeypatch.setenv("KFK_LOGGING_FORMAT", "json")
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"kfk": {"logging": {"level": {"root": "INFO", "kfk.consumer": "DEBUG"}}}})
        adapter.configure(config)
        assert adapter._module_levels == {"kfk.consumer": "DEBUG"}
        assert logging.getLogger("kfk.consumer").level == logging.DEBUG


class TestStructlogAdapterOutput:
    def test_stdlib_records_rendered_as_json(self):
        stream = io.StringIO()
        adapter = StructlogAdapter(stream=stream)
        adapter.configure(Config({"kfk": {"logging": {"format": "json"}}}))

        logging.getLogger("kfk.registry").warning("Replacing handler for '%s'", "Order")

        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "Replacing handler for 'Order'"
        assert event["level"] == "warning"
        assert event["logger"] == "kfk.registry"

    def test_structlog_logger_shares_handler(self):
        stream = io.StringIO()
        adapter = StructlogAdapter(stream=stream)
        adapter.configure(Config({"kfk": {"logging": {"format": "json"}}}))

        adapter.get_logger("kfk.test").info("consumer_started", group="billing")

        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "consumer_started"
        assert event["group"] == "billing"


class TestStructlogAdapterSetLevel:
    def test_set_level_updates_module_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        adapter.set_level("kfk.adapters.kafka", "WARNING")
        assert logging.getLogger("kfk.adapters.kafka").level == logging.WARNING
