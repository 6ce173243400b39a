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
"""Payload codec: JSON by default, custom bytes for types that opt in.

A payload type opts out of JSON by implementing one or both hooks::

    @dataclass
    class Point:
        x: int
        y: int

        def marshal_kfk(self) -> bytes:
            return f"{self.x};{self.y}".encode()

        @classmethod
        def unmarshal_kfk(cls, data: bytes) -> Point:
            x, y = data.decode().split(";")
            return cls(int(x), int(y))

Every other type (dataclasses, pydantic models, TypedDicts, primitives
and containers of those) goes through a pydantic ``TypeAdapter``.
"""

from __future__ import annotations

import functools
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from kfk.kernel.exceptions import DecodeException, EncodeException

T = TypeVar("T")


@runtime_checkable
class CustomEncoder(Protocol):
    """A payload that produces its own wire bytes."""

    def marshal_kfk(self) -> bytes: ...


@runtime_checkable
class CustomDecoder(Protocol):
    """A payload type that builds instances from its own wire bytes."""

    @classmethod
    def unmarshal_kfk(cls, data: bytes) -> Any: ...


@functools.lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def type_identifier(message: Any) -> str:
    """Identifier used for the ``@type`` header and handler lookup.

    A class and any instance of it map to the same identifier.
    """
    message_type = message if isinstance(message, type) else type(message)
    return message_type.__name__


def encode(value: Any) -> bytes:
    """Serialize *value*, raising :class:`EncodeException` on failure."""
    name = type_identifier(value)
    if isinstance(value, CustomEncoder):
        try:
            data = value.marshal_kfk()
        except Exception as exc:
            raise EncodeException(
                f"Custom encoder of '{name}' failed: {exc}", code="KFK_ENCODE", context={"type": name}
            ) from exc
        if not isinstance(data, (bytes, bytearray)):
            raise EncodeException(
                f"Custom encoder of '{name}' returned {type(data).__name__}, expected bytes",
                code="KFK_ENCODE",
                context={"type": name},
            )
        return bytes(data)

    try:
        return _adapter(type(value)).dump_json(value)
    except (PydanticUserError, ValueError) as exc:
        raise EncodeException(
            f"Cannot encode '{name}' as JSON: {exc}", code="KFK_ENCODE", context={"type": name}
        ) from exc


def decode(data: bytes, target_type: type[T]) -> T:
    """Deserialize *data* into *target_type*, raising :class:`DecodeException` on failure."""
    name = type_identifier(target_type)
    unmarshal = getattr(target_type, "unmarshal_kfk", None)
    if callable(unmarshal):
        try:
            return unmarshal(data)
        except Exception as exc:
            raise DecodeException(
                f"Custom decoder of '{name}' failed: {exc}", code="KFK_DECODE", context={"type": name}
            ) from exc

    try:
        return _adapter(target_type).validate_json(data)
    except (PydanticUserError, ValidationError) as exc:
        raise DecodeException(
            f"Cannot decode '{name}' from JSON: {exc}", code="KFK_DECODE", context={"type": name}
        ) from exc
