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
"""Adapters turning typed callbacks into raw-bytes handlers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from kfk.codec import decode
from kfk.types import MessageContext

T = TypeVar("T")

RawHandler = Callable[[MessageContext, bytes], Awaitable[None]]
"""Handler receiving the undecoded record value (also the fallback signature)."""

TypedCallback = Callable[[MessageContext, T], Awaitable[None]]


class TypedHandler(Generic[T]):
    """Raw handler that decodes into ``message_type`` before calling back.

    A :class:`~kfk.kernel.exceptions.DecodeException` is raised before the
    callback runs; exceptions from the callback propagate unchanged.
    """

    __slots__ = ("_callback", "_message_type")

    def __init__(self, message_type: type[T], callback: TypedCallback[T]) -> None:
        self._message_type = message_type
        self._callback = callback

    @property
    def message_type(self) -> type[T]:
        return self._message_type

    @property
    def callback(self) -> TypedCallback[T]:
        return self._callback

    async def __call__(self, ctx: MessageContext, data: bytes) -> None:
        message = decode(data, self._message_type)
        await self._callback(ctx, message)

    def __repr__(self) -> str:
        name = getattr(self._callback, "__qualname__", repr(self._callback))
        return f"TypedHandler({self._message_type.__name__}, {name})"


def new_handler(message_type: type[T], callback: TypedCallback[T]) -> TypedHandler[T]:
    """Wrap ``callback(ctx, message)`` so it can be registered on a consumer."""
    return TypedHandler(message_type, callback)
