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
"""Outbound port for the broker client that moves records to and from Kafka."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, runtime_checkable

from kfk.types import Message

RecordHandler = Callable[[Message], Awaitable[None]]


@runtime_checkable
class BrokerClientPort(Protocol):
    """Transport used by producers and consumers.

    Partition assignment, rebalancing, offset commits and retries are the
    implementation's concern.
    """

    async def connect(self) -> None: ...

    async def publish(
        self,
        topic: str,
        value: bytes,
        *,
        key: bytes | None = None,
        headers: dict[str, bytes] | None = None,
    ) -> None: ...

    async def consume(
        self,
        topics: Sequence[str],
        group_id: str,
        on_record: RecordHandler,
        stop_event: asyncio.Event,
    ) -> None: ...

    async def healthy(self) -> bool: ...

    async def close(self) -> None: ...
