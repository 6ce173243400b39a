"""kfk ports: contracts implemented by the broker adapters."""

from kfk.ports.outbound import BrokerClientPort, RecordHandler

__all__ = ["BrokerClientPort", "RecordHandler"]
