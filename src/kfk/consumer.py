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
"""Consumer routing records to typed handlers by their ``@type`` header.

Dispatch for each delivered record:

1. read the ``@type`` header (missing header -> empty identifier);
2. look the identifier up in the handler registry, falling back to the
   fallback handler when there is no exact match;
3. build a fresh :class:`~kfk.types.MessageContext` and await the handler;
4. without any handler the record is dropped, which is not an error.

Handler and decode failures are handled according to the consumer's
:class:`~kfk.properties.ErrorStrategy`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from types import TracebackType
from typing import TypeVar

from kfk.adapters.kafka import KafkaBrokerClient
from kfk.codec import type_identifier
from kfk.handler import RawHandler, TypedCallback, new_handler
from kfk.kernel.exceptions import ConfigException, ConsumerStateException
from kfk.ports.outbound import BrokerClientPort
from kfk.properties import ErrorStrategy, KafkaProperties
from kfk.registry import HandlerRegistry
from kfk.types import Message, MessageContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConsumerState(Enum):
    CREATED = "CREATED"
    CONSUMING = "CONSUMING"
    DRAINING = "DRAINING"
    STOPPED = "STOPPED"


class Consumer:
    """Consumer-group member dispatching typed payloads to handlers.

    Register handlers first, then await :meth:`start`; it returns once
    :meth:`stop` is called or the stop event passed to it is set. A
    consumer can be started only once.

    Usage::

        consumer = await Consumer.connect(["localhost:9092"], "billing", ["orders"])

        @consumer.handler(OrderPlaced)
        async def on_order(ctx: MessageContext, order: OrderPlaced) -> None:
            ...

        await consumer.start(stop_event)
    """

    def __init__(
        self,
        client: BrokerClientPort,
        group_id: str,
        topics: Sequence[str],
        *,
        error_strategy: ErrorStrategy = ErrorStrategy.LOG_AND_CONTINUE,
    ) -> None:
        if not group_id:
            raise ConfigException("Consumer group id must not be empty", code="KFK_CONFIG")
        if not topics or not all(topics):
            raise ConfigException("At least one non-empty topic is required", code="KFK_CONFIG")
        self._client = client
        self._group_id = group_id
        self._topics = list(topics)
        self._error_strategy = error_strategy
        self._registry = HandlerRegistry()
        self._state = ConsumerState.CREATED
        self._stop_event = asyncio.Event()

    @classmethod
    async def connect(
        cls,
        brokers: Sequence[str],
        group_id: str,
        topics: Sequence[str],
        *,
        properties: KafkaProperties | None = None,
        error_strategy: ErrorStrategy | None = None,
    ) -> Consumer:
        """Create a consumer on a connected Kafka client.

        Raises:
            ConfigException: *brokers*, *group_id* or *topics* is empty.
            BrokerConnectionException: no broker could be reached.
        """
        if not brokers:
            raise ConfigException("At least one broker address is required", code="KFK_CONFIG")
        properties = properties or KafkaProperties()
        client = KafkaBrokerClient(brokers, properties=properties)
        consumer = cls(
            client,
            group_id,
            topics,
            error_strategy=error_strategy or properties.error_strategy,
        )
        await client.connect()
        return consumer

    # ── registration ───────────────────────────────────────────

    def add_handler(self, type_identifier: str, handler: RawHandler) -> None:
        """Route records tagged *type_identifier* to *handler*. Setup only."""
        self._registry.add_handler(type_identifier, handler)

    def add_fallback(self, handler: RawHandler) -> None:
        """Receive the raw value of untagged or unrouted records. Setup only."""
        self._registry.add_fallback(handler)

    def handler(self, message_type: type[T]) -> Callable[[TypedCallback[T]], TypedCallback[T]]:
        """Decorator registering a typed callback for *message_type*."""

        def decorator(func: TypedCallback[T]) -> TypedCallback[T]:
            self.add_handler(type_identifier(message_type), new_handler(message_type, func))
            return func

        return decorator

    # ── lifecycle ──────────────────────────────────────────────

    @property
    def state(self) -> ConsumerState:
        return self._state

    @property
    def group_id(self) -> str:
        return self._group_id

    @property
    def topics(self) -> list[str]:
        return list(self._topics)

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    async def start(self, stop_event: asyncio.Event | None = None) -> None:
        """Consume until stopped; blocks the calling task.

        Returns ``None`` after a requested stop. Exceptions raised by the
        broker client, and handler exceptions under ``FAIL_FAST``,
        propagate unchanged.
        """
        if self._state is not ConsumerState.CREATED:
            raise ConsumerStateException(
                f"Consumer is {self._state.value}; create a new consumer to consume again",
                code="KFK_CONSUMER_STATE",
            )
        if stop_event is not None:
            if self._stop_event.is_set():
                stop_event.set()
            self._stop_event = stop_event
        self._registry.freeze()
        self._state = ConsumerState.CONSUMING
        logger.info(
            "Consumer group '%s' consuming %s with handlers for %s",
            self._group_id,
            self._topics,
            sorted(self._registry.registered_types()),
        )
        watcher = asyncio.create_task(self._watch_stop())
        try:
            await self._client.consume(self._topics, self._group_id, self._dispatch, self._stop_event)
        finally:
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher
            self._state = ConsumerState.STOPPED
            logger.info("Consumer group '%s' stopped", self._group_id)

    def stop(self) -> None:
        """Ask a running consumer to finish its in-flight records and return."""
        self._stop_event.set()

    async def _watch_stop(self) -> None:
        await self._stop_event.wait()
        if self._state is ConsumerState.CONSUMING:
            self._state = ConsumerState.DRAINING
            logger.info("Consumer group '%s' draining", self._group_id)

    # ── dispatch ───────────────────────────────────────────────

    async def _dispatch(self, record: Message) -> None:
        identifier = record.type_identifier
        handler = self._registry.resolve(identifier)
        if handler is None:
            logger.debug(
                "No handler for '%s' on topic '%s' (offset %s); dropping record",
                identifier,
                record.topic,
                record.offset,
            )
            return

        ctx = MessageContext.for_message(record, self._stop_event)
        try:
            await handler(ctx, record.value)
        except Exception as exc:
            if self._error_strategy is ErrorStrategy.FAIL_FAST:
                raise
            self._report_handler_error(record, identifier, exc)

    def _report_handler_error(self, record: Message, identifier: str, exc: Exception) -> None:
        if self._error_strategy is ErrorStrategy.IGNORE:
            logger.debug("Ignoring handler failure for '%s' on topic '%s': %s", identifier, record.topic, exc)
            return
        logger.error(
            "Handler for '%s' failed on topic '%s' (partition %s, offset %s)",
            identifier,
            record.topic,
            record.partition,
            record.offset,
            exc_info=exc,
        )

    # ── health ─────────────────────────────────────────────────

    async def health_check(self) -> bool:
        """True while the broker is reachable; never raises."""
        try:
            return await self._client.healthy()
        except Exception:
            logger.exception("Consumer health check raised")
            return False

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> Consumer:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
        await self.close()
