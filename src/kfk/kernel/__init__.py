"""kfk kernel: exception hierarchy shared by every module."""

from kfk.kernel.exceptions import (
    BrokerConnectionException,
    ConfigException,
    ConsumerStateException,
    DecodeException,
    EncodeException,
    IllegalStateException,
    InfrastructureException,
    KfkException,
    RegistryFrozenException,
    SerializationException,
)

__all__ = [
    "BrokerConnectionException",
    "ConfigException",
    "ConsumerStateException",
    "DecodeException",
    "EncodeException",
    "IllegalStateException",
    "InfrastructureException",
    "KfkException",
    "RegistryFrozenException",
    "SerializationException",
]
