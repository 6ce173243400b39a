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
"""Handler registry keyed by type identifier, with an optional fallback.

The registry is populated during single-threaded setup and frozen when a
consumer starts. Once frozen it is only read, which makes concurrent
lookups from partition workers safe without locking.
"""

from __future__ import annotations

import logging

from kfk.handler import RawHandler
from kfk.kernel.exceptions import ConfigException, RegistryFrozenException

_logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Exact-match map from type identifier to raw handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, RawHandler] = {}
        self._fallback: RawHandler | None = None
        self._frozen = False

    # ── registration ───────────────────────────────────────────

    def add_handler(self, type_identifier: str, handler: RawHandler) -> None:
        """Bind *handler* to *type_identifier*; a later call for the same key wins."""
        self._check_mutable()
        if not type_identifier:
            raise ConfigException("Type identifier must not be empty", code="KFK_CONFIG")
        if type_identifier in self._handlers:
            _logger.warning(
                "Replacing handler for '%s': %r -> %r",
                type_identifier,
                self._handlers[type_identifier],
                handler,
            )
        self._handlers[type_identifier] = handler
        _logger.debug("Registered handler %r for '%s'", handler, type_identifier)

    def add_fallback(self, handler: RawHandler) -> None:
        """Bind the handler for untagged records and unknown identifiers."""
        self._check_mutable()
        if self._fallback is not None:
            _logger.warning("Replacing fallback handler: %r -> %r", self._fallback, handler)
        self._fallback = handler

    def freeze(self) -> None:
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenException(
                "Handlers must be registered before the consumer starts", code="KFK_REGISTRY_FROZEN"
            )

    # ── lookup ─────────────────────────────────────────────────

    def resolve(self, type_identifier: str) -> RawHandler | None:
        """Handler for *type_identifier*, else the fallback, else ``None``."""
        handler = self._handlers.get(type_identifier) if type_identifier else None
        if handler is not None:
            return handler
        return self._fallback

    def has_handler(self, type_identifier: str) -> bool:
        return type_identifier in self._handlers

    # ── introspection ──────────────────────────────────────────

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def has_fallback(self) -> bool:
        return self._fallback is not None

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def registered_types(self) -> set[str]:
        return set(self._handlers)
