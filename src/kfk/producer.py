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
"""Producer publishing typed payloads tagged with their type identifier."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType
from typing import Any

from kfk.adapters.kafka import KafkaBrokerClient
from kfk.codec import encode, type_identifier
from kfk.kernel.exceptions import ConfigException
from kfk.ports.outbound import BrokerClientPort
from kfk.properties import KafkaProperties
from kfk.types import TYPE_HEADER

logger = logging.getLogger(__name__)


class Producer:
    """Encodes payloads and publishes them with an ``@type`` header.

    Usage::

        producer = await Producer.connect(["localhost:9092"])
        await producer.send("orders", order.id, order)
    """

    def __init__(self, client: BrokerClientPort) -> None:
        self._client = client

    @classmethod
    async def connect(
        cls,
        brokers: Sequence[str],
        *,
        properties: KafkaProperties | None = None,
    ) -> Producer:
        """Create a producer on a connected Kafka client.

        Raises:
            ConfigException: *brokers* is empty.
            BrokerConnectionException: no broker could be reached.
        """
        if not brokers:
            raise ConfigException("At least one broker address is required", code="KFK_CONFIG")
        client = KafkaBrokerClient(brokers, properties=properties)
        await client.connect()
        return cls(client)

    @property
    def client(self) -> BrokerClientPort:
        return self._client

    async def send(self, topic: str, key: str | bytes | None, message: Any) -> None:
        """Publish *message* to *topic*, waiting for the broker's acknowledgement.

        Raises:
            EncodeException: *message* could not be serialized; nothing was sent.
        """
        value = encode(message)
        identifier = type_identifier(message)
        if isinstance(key, str):
            key = key.encode()
        await self._client.publish(
            topic,
            value,
            key=key,
            headers={TYPE_HEADER: identifier.encode()},
        )
        logger.debug("Sent '%s' to topic '%s' (%d bytes)", identifier, topic, len(value))

    async def health_check(self) -> bool:
        """True while the broker is reachable; never raises."""
        try:
            return await self._client.healthy()
        except Exception:
            logger.exception("Producer health check raised")
            return False

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> Producer:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
