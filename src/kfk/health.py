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
"""Health indicators exposing producer/consumer liveness as UP/DOWN status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass
class HealthStatus:
    """Health status for a single component."""

    status: str  # "UP" or "DOWN"
    details: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class HealthProbe(Protocol):
    """Anything with a boolean liveness check, e.g. Producer and Consumer."""

    async def health_check(self) -> bool: ...


class BrokerHealthIndicator:
    """Reports a producer's or consumer's broker connectivity."""

    def __init__(self, name: str, probe: HealthProbe) -> None:
        self._name = name
        self._probe = probe

    @property
    def name(self) -> str:
        return self._name

    async def health(self) -> HealthStatus:
        try:
            reachable = await self._probe.health_check()
        except Exception:
            logger.exception("Health probe '%s' raised", self._name)
            reachable = False
        return HealthStatus(
            status="UP" if reachable else "DOWN",
            details={"component": self._name, "broker": "reachable" if reachable else "unreachable"},
        )
