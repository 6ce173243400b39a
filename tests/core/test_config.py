"""Tests for configuration system."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from kfk.core.config import Config, config_properties
from kfk.properties import ErrorStrategy, KafkaProperties


class TestConfig:
    def test_load_from_dict(self):
        config = Config({"kfk": {"kafka": {"client_id": "billing", "poll_timeout_ms": 250}}})
        assert config.get("kfk.kafka.client_id") == "billing"
        assert config.get("kfk.kafka.poll_timeout_ms") == 250

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "kfk.yaml"
        config_file.write_text("kfk:\n  kafka:\n    client_id: yaml-client\n")
        config = Config.from_file(config_file)
        assert config.get("kfk.kafka.client_id") == "yaml-client"

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "kfk.toml"
        config_file.write_text('[kfk.kafka]\nclient_id = "toml-client"\n')
        config = Config.from_file(config_file)
        assert config.get("kfk.kafka.client_id") == "toml-client"

    def test_missing_file_is_empty(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.to_dict() == {}

    def test_env_key(self):
        assert Config.env_key("kfk.kafka.bootstrap_servers") == "KFK_KAFKA_BOOTSTRAP_SERVERS"
        assert Config.env_key("app.name") == "KFK_APP_NAME"

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("KFK_KAFKA_CLIENT_ID", "env-client")
        config = Config({"kfk": {"kafka": {"client_id": "file-client"}}})
        assert config.get("kfk.kafka.client_id") == "env-client"

    def test_placeholder_resolution(self, monkeypatch):
        monkeypatch.setenv("BROKER_HOST", "kafka.internal")
        config = Config({"kfk": {"kafka": {"client_id": "${BROKER_HOST}", "acks": "${missing:all}"}}})
        assert config.get("kfk.kafka.client_id") == "kafka.internal"
        assert config.get("kfk.kafka.acks") == "all"

    def test_unresolvable_placeholder_raises(self):
        config = Config({"a": "${nowhere}"})
        with pytest.raises(ValueError, match="nowhere"):
            config.get("a")


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="database")
        @dataclass
        class DatabaseConfig:
            url: str = "sqlite:///test.db"
            pool_size: int = 5

        config = Config({"database": {"url": "postgresql://localhost/mydb", "pool_size": 20}})
        db_config = config.bind(DatabaseConfig)
        assert db_config.url == "postgresql://localhost/mydb"
        assert db_config.pool_size == 20

    def test_bind_undecorated_class_raises(self):
        @dataclass
        class Plain:
            value: int = 1

        with pytest.raises(ValueError, match="config_properties"):
            Config({}).bind(Plain)

    def test_kafka_properties_defaults(self):
        props = Config({}).bind(KafkaProperties)
        assert props.bootstrap_servers == ["localhost:9092"]
        assert props.auto_offset_reset == "earliest"
        assert props.enable_auto_commit is False
        assert props.error_strategy is ErrorStrategy.LOG_AND_CONTINUE
        assert props.producer_acks == 1

    def test_kafka_properties_from_file_values(self):
        config = Config(
            {"kfk": {"kafka": {"bootstrap_servers": ["a:9092", "b:9092"], "acks": "all", "health_timeout_s": 1.5}}}
        )
        props = config.bind(KafkaProperties)
        assert props.bootstrap_servers == ["a:9092", "b:9092"]
        assert props.producer_acks == "all"
        assert props.health_timeout_s == 1.5

    def test_kafka_properties_from_env(self, monkeypatch):
        monkeypatch.setenv("KFK_KAFKA_BOOTSTRAP_SERVERS", "k1:9092, k2:9092")
        monkeypatch.setenv("KFK_KAFKA_POLL_TIMEOUT_MS", "100")
        monkeypatch.setenv("KFK_KAFKA_ENABLE_AUTO_COMMIT", "true")
        monkeypatch.setenv("KFK_KAFKA_ERROR_STRATEGY", "fail_fast")

        props = Config({}).bind(KafkaProperties)

        assert props.bootstrap_servers == ["k1:9092", "k2:9092"]
        assert props.poll_timeout_ms == 100
        assert props.enable_auto_commit is True
        assert props.error_strategy is ErrorStrategy.FAIL_FAST
