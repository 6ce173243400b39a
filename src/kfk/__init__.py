"""kfk: typed message dispatch on top of a Kafka broker client.

Producers tag every payload with its type name; consumers use that tag to
route each record to the handler registered for the type, decoding the
payload on the way::

    from kfk import Consumer, MessageContext, Producer, topic_from_context
"""

from kfk.codec import CustomDecoder, CustomEncoder, decode, encode, type_identifier
from kfk.consumer import Consumer, ConsumerState
from kfk.handler import RawHandler, TypedHandler, new_handler
from kfk.kernel.exceptions import (
    BrokerConnectionException,
    ConfigException,
    ConsumerStateException,
    DecodeException,
    EncodeException,
    KfkException,
    RegistryFrozenException,
)
from kfk.logging import configure_logging
from kfk.ports.outbound import BrokerClientPort
from kfk.producer import Producer
from kfk.properties import ErrorStrategy, KafkaProperties
from kfk.registry import HandlerRegistry
from kfk.types import TYPE_HEADER, Message, MessageContext, topic_from_context

__all__ = [
    "TYPE_HEADER",
    "BrokerClientPort",
    "BrokerConnectionException",
    "ConfigException",
    "Consumer",
    "ConsumerState",
    "ConsumerStateException",
    "CustomDecoder",
    "CustomEncoder",
    "DecodeException",
    "EncodeException",
    "ErrorStrategy",
    "HandlerRegistry",
    "KafkaProperties",
    "KfkException",
    "Message",
    "MessageContext",
    "Producer",
    "RawHandler",
    "RegistryFrozenException",
    "TypedHandler",
    "configure_logging",
    "decode",
    "encode",
    "new_handler",
    "topic_from_context",
    "type_identifier",
]
