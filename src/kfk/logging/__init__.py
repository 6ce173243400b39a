"""kfk logging: logging port, the structlog-backed adapter and setup helper."""

from kfk.logging.port import LoggingPort
from kfk.logging.setup import configure_logging
from kfk.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter", "configure_logging"]
