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
"""Message record and per-record handler context."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

TYPE_HEADER = "@type"
"""Header carrying the UTF-8 encoded type identifier of the payload."""


@dataclass(frozen=True)
class Message:
    """A broker record as published or delivered."""

    topic: str
    value: bytes
    key: bytes | None = None
    headers: dict[str, bytes] = field(default_factory=dict)
    partition: int | None = None
    offset: int | None = None

    @property
    def type_identifier(self) -> str:
        """The ``@type`` header as text, or ``""`` for untagged records."""
        raw = self.headers.get(TYPE_HEADER)
        if not raw:
            return ""
        return raw.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class MessageContext:
    """Immutable metadata handed to a handler alongside its payload.

    A fresh instance is built for every delivered record and is only
    meaningful for the duration of that handler call.
    """

    topic: str = ""
    key: bytes | None = None
    headers: Mapping[str, bytes] = field(default_factory=lambda: MappingProxyType({}))
    partition: int | None = None
    offset: int | None = None
    stop_event: asyncio.Event | None = field(default=None, compare=False, repr=False)

    @classmethod
    def for_message(cls, message: Message, stop_event: asyncio.Event | None = None) -> MessageContext:
        return cls(
            topic=message.topic,
            key=message.key,
            headers=MappingProxyType(dict(message.headers)),
            partition=message.partition,
            offset=message.offset,
            stop_event=stop_event,
        )

    @property
    def cancelled(self) -> bool:
        """True once the consumer has been asked to stop."""
        return self.stop_event is not None and self.stop_event.is_set()


def topic_from_context(ctx: MessageContext | None) -> tuple[str, bool]:
    """Return ``(topic, True)`` for a handler context, ``("", False)`` otherwise."""
    if ctx is None or not ctx.topic:
        return "", False
    return ctx.topic, True
