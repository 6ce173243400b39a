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
"""Kafka client configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from kfk.core.config import config_properties


class ErrorStrategy(Enum):
    """What the consumer does when a handler or its decode step fails."""

    IGNORE = "IGNORE"
    LOG_AND_CONTINUE = "LOG_AND_CONTINUE"
    FAIL_FAST = "FAIL_FAST"


@config_properties(prefix="kfk.kafka")
@dataclass
class KafkaProperties:
    """Tuning for the aiokafka-backed broker client (kfk.kafka.*)."""

    bootstrap_servers: list[str] = field(default_factory=lambda: ["localhost:9092"])
    client_id: str = "kfk"
    auto_offset_reset: str = "earliest"
    enable_auto_commit: bool = False
    poll_timeout_ms: int = 500
    request_timeout_ms: int = 40000
    acks: str = "1"
    health_timeout_s: float = 5.0
    error_strategy: ErrorStrategy = ErrorStrategy.LOG_AND_CONTINUE

    @property
    def producer_acks(self) -> int | str:
        """``acks`` as aiokafka expects it: 0, 1 or "all"."""
        return self.acks if self.acks == "all" else int(self.acks)
