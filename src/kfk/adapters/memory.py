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
"""In-memory broker client for testing and single-process applications."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Sequence

from kfk.kernel.exceptions import BrokerConnectionException
from kfk.ports.outbound import RecordHandler
from kfk.types import Message

logger = logging.getLogger(__name__)


class InMemoryBrokerClient:
    """Append-only per-topic logs with per-group offsets.

    Every topic has a single partition (0). A consumer group resumes from
    the offset after the last record whose handler returned, so records
    published before ``consume`` starts are delivered too, like a Kafka
    consumer reading from the earliest offset.
    """

    def __init__(self, poll_interval: float = 0.05) -> None:
        self._poll_interval = poll_interval
        self._logs: dict[str, list[Message]] = {}
        self._offsets: dict[tuple[str, str], int] = {}
        self._published = asyncio.Condition()
        self._running = False

    async def connect(self) -> None:
        self._running = True

    async def publish(
        self,
        topic: str,
        value: bytes,
        *,
        key: bytes | None = None,
        headers: dict[str, bytes] | None = None,
    ) -> None:
        if not self._running:
            raise BrokerConnectionException("Broker is not running", code="KFK_CONNECTION")
        log = self._logs.setdefault(topic, [])
        log.append(
            Message(
                topic=topic,
                value=value,
                key=key,
                headers=dict(headers or {}),
                partition=0,
                offset=len(log),
            )
        )
        async with self._published:
            self._published.notify_all()

    async def consume(
        self,
        topics: Sequence[str],
        group_id: str,
        on_record: RecordHandler,
        stop_event: asyncio.Event,
    ) -> None:
        if not self._running:
            raise BrokerConnectionException("Broker is not running", code="KFK_CONNECTION")
        logger.info("Joined consumer group '%s' for topics %s", group_id, list(topics))
        try:
            while not stop_event.is_set():
                delivered = False
                for topic in topics:
                    for record in self._pending(topic, group_id):
                        await on_record(record)
                        self._offsets[(group_id, topic)] = record.offset + 1  # type: ignore[operator]
                        delivered = True
                if not delivered:
                    await self._wait_for_records()
        finally:
            logger.info("Left consumer group '%s'", group_id)

    def _pending(self, topic: str, group_id: str) -> list[Message]:
        start = self._offsets.get((group_id, topic), 0)
        return self._logs.get(topic, [])[start:]

    async def _wait_for_records(self) -> None:
        async with self._published:
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._published.wait(), timeout=self._poll_interval)

    def records(self, topic: str) -> list[Message]:
        """Everything published to *topic* so far."""
        return list(self._logs.get(topic, []))

    def committed(self, group_id: str, topic: str) -> int:
        """Next offset *group_id* will read from *topic*."""
        return self._offsets.get((group_id, topic), 0)

    async def healthy(self) -> bool:
        return self._running

    async def close(self) -> None:
        self._running = False
