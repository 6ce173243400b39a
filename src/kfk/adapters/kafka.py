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
"""Kafka broker client: wraps aiokafka."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from aiokafka import AIOKafkaConsumer, AIOKafkaProducer  # type: ignore[import-untyped]
from aiokafka.client import AIOKafkaClient  # type: ignore[import-untyped]
from aiokafka.errors import KafkaError  # type: ignore[import-untyped]

from kfk.kernel.exceptions import BrokerConnectionException, ConfigException
from kfk.ports.outbound import RecordHandler
from kfk.properties import KafkaProperties
from kfk.types import Message

logger = logging.getLogger(__name__)


class KafkaBrokerClient:
    """BrokerClientPort implementation backed by Apache Kafka via aiokafka.

    One instance owns at most one metadata client, one producer (started on
    first publish) and one consumer-group session per ``consume`` call.
    """

    def __init__(
        self,
        bootstrap_servers: Sequence[str] | str | None = None,
        *,
        properties: KafkaProperties | None = None,
    ) -> None:
        self._properties = properties or KafkaProperties()
        if bootstrap_servers is None:
            bootstrap_servers = self._properties.bootstrap_servers
        if isinstance(bootstrap_servers, str):
            bootstrap_servers = [s.strip() for s in bootstrap_servers.split(",") if s.strip()]
        if not bootstrap_servers:
            raise ConfigException("At least one broker address is required", code="KFK_CONFIG")
        self._bootstrap_servers = list(bootstrap_servers)
        self._client: Any = None
        self._producer: Any = None
        self._producer_lock = asyncio.Lock()

    @property
    def bootstrap_servers(self) -> list[str]:
        return list(self._bootstrap_servers)

    async def connect(self) -> None:
        """Bootstrap cluster metadata, failing fast when no broker answers."""
        client = AIOKafkaClient(
            bootstrap_servers=self._bootstrap_servers,
            client_id=self._properties.client_id,
            request_timeout_ms=self._properties.request_timeout_ms,
        )
        try:
            await client.bootstrap()
        except (KafkaError, OSError) as exc:
            await client.close()
            raise BrokerConnectionException(
                f"Cannot reach Kafka brokers {self._bootstrap_servers}: {exc}",
                code="KFK_CONNECTION",
                context={"brokers": self._bootstrap_servers},
            ) from exc
        self._client = client
        logger.info("Connected to Kafka brokers %s", self._bootstrap_servers)

    async def publish(
        self,
        topic: str,
        value: bytes,
        *,
        key: bytes | None = None,
        headers: dict[str, bytes] | None = None,
    ) -> None:
        producer = await self._ensure_producer()
        kafka_headers = list(headers.items()) if headers else None
        await producer.send_and_wait(topic, value=value, key=key, headers=kafka_headers)

    async def _ensure_producer(self) -> Any:
        async with self._producer_lock:
            if self._producer is None:
                producer = AIOKafkaProducer(
                    bootstrap_servers=self._bootstrap_servers,
                    client_id=self._properties.client_id,
                    acks=self._properties.producer_acks,
                    request_timeout_ms=self._properties.request_timeout_ms,
                )
                await producer.start()
                self._producer = producer
            return self._producer

    async def consume(
        self,
        topics: Sequence[str],
        group_id: str,
        on_record: RecordHandler,
        stop_event: asyncio.Event,
    ) -> None:
        """Join *group_id* and feed records to *on_record* until *stop_event* is set.

        Records of one partition are awaited in order; partitions fetched in
        the same batch are processed concurrently. The in-flight batch is
        finished before the session is closed.

        Unless ``enable_auto_commit`` is set, the offset of each partition is
        committed up to the last record whose handler returned. When a
        handler raises, the other partitions of the batch are cancelled,
        their progress is committed, the session is closed and the first
        handler exception is re-raised; the failing record stays
        uncommitted and is redelivered to the group.
        """
        consumer = AIOKafkaConsumer(
            *topics,
            bootstrap_servers=self._bootstrap_servers,
            client_id=self._properties.client_id,
            group_id=group_id,
            auto_offset_reset=self._properties.auto_offset_reset,
            enable_auto_commit=self._properties.enable_auto_commit,
            request_timeout_ms=self._properties.request_timeout_ms,
        )
        try:
            await consumer.start()
            logger.info("Joined consumer group '%s' for topics %s", group_id, list(topics))
            while not stop_event.is_set():
                batch = await consumer.getmany(timeout_ms=self._properties.poll_timeout_ms)
                if not batch:
                    continue
                try:
                    async with asyncio.TaskGroup() as group:
                        for tp, records in batch.items():
                            group.create_task(self._drain_partition(consumer, tp, records, on_record))
                except BaseExceptionGroup as errors:
                    raise errors.exceptions[0] from None
        finally:
            await consumer.stop()
            logger.info("Left consumer group '%s'", group_id)

    async def _drain_partition(
        self, consumer: Any, tp: Any, records: Iterable[Any], on_record: RecordHandler
    ) -> None:
        next_offset: int | None = None
        try:
            for record in records:
                await on_record(self._to_message(record))
                next_offset = record.offset + 1
        finally:
            if next_offset is not None and not self._properties.enable_auto_commit:
                await consumer.commit({tp: next_offset})

    @staticmethod
    def _to_message(record: Any) -> Message:
        return Message(
            topic=record.topic,
            value=record.value if record.value is not None else b"",
            key=record.key,
            headers={k: bytes(v) if v is not None else b"" for k, v in (record.headers or ())},
            partition=record.partition,
            offset=record.offset,
        )

    async def healthy(self) -> bool:
        """Refresh cluster metadata; any failure or timeout means unhealthy."""
        if self._client is None:
            return False
        try:
            await asyncio.wait_for(
                self._client.fetch_all_metadata(), timeout=self._properties.health_timeout_s
            )
        except (KafkaError, OSError, TimeoutError) as exc:
            logger.warning("Kafka health check failed for %s: %s", self._bootstrap_servers, exc)
            return False
        return True

    async def close(self) -> None:
        if self._producer is not None:
            await self._producer.stop()
            self._producer = None
        if self._client is not None:
            await self._client.close()
            self._client = None
