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
"""Tests for BrokerHealthIndicator."""

from __future__ import annotations

from unittest.mock import AsyncMock

from kfk.adapters.memory import InMemoryBrokerClient
from kfk.consumer import Consumer
from kfk.health import BrokerHealthIndicator, HealthProbe, HealthStatus
from kfk.producer import Producer


class TestBrokerHealthIndicator:
    def test_producer_and_consumer_are_probes(self) -> None:
        client = InMemoryBrokerClient()
        assert isinstance(Producer(client), HealthProbe)
        assert isinstance(Consumer(client, "g", ["t"]), HealthProbe)

    async def test_up_when_reachable(self, broker: InMemoryBrokerClient) -> None:
        indicator = BrokerHealthIndicator("kafka-producer", Producer(broker))
        status = await indicator.health()

        assert isinstance(status, HealthStatus)
        assert status.status == "UP"
        assert status.details == {"component": "kafka-producer", "broker": "reachable"}

    async def test_down_when_unreachable(self, broker: InMemoryBrokerClient) -> None:
        consumer = Consumer(broker, "g", ["t"])
        await broker.close()

        status = await BrokerHealthIndicator("kafka-consumer", consumer).health()

        assert status.status == "DOWN"
        assert status.details["broker"] == "unreachable"

    async def test_down_when_probe_raises(self) -> None:
        probe = AsyncMock()
        probe.health_check.side_effect = RuntimeError("boom")

        status = await BrokerHealthIndicator("flaky", probe).health()

        assert status.status == "DOWN"
        assert BrokerHealthIndicator("flaky", probe).name == "flaky"
