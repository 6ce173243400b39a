"""Unified exception hierarchy for kfk.

All library exceptions inherit from KfkException, so callers can catch a
single base class or target a specific failure.

Categories:
- ConfigException: invalid construction arguments
- SerializationException: payloads that cannot be encoded or decoded
- IllegalStateException: lifecycle misuse of producers and consumers
- InfrastructureException: broker connectivity failures

Records without a matching handler and a cancelled consume loop are not
errors and have no exception type.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Base Exception
# =============================================================================


class KfkException(Exception):
    """Base exception for all kfk errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "KFK_DECODE").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict[str, Any] = context if context is not None else {}


# =============================================================================
# Configuration
# =============================================================================


class ConfigException(KfkException):
    """Invalid construction arguments (empty brokers, topics or group id)."""


# =============================================================================
# Serialization
# =============================================================================


class SerializationException(KfkException):
    """A payload could not be converted to or from bytes."""


class EncodeException(SerializationException):
    """An outgoing payload failed to serialize; nothing was published."""


class DecodeException(SerializationException):
    """Incoming bytes failed to deserialize into the handler's message type."""


# =============================================================================
# Lifecycle
# =============================================================================


class IllegalStateException(KfkException):
    """Operation not permitted in the component's current state."""


class ConsumerStateException(IllegalStateException):
    """A consumer was started twice; build a new one to consume again."""


class RegistryFrozenException(IllegalStateException):
    """Handlers were registered after the consume loop started."""


# =============================================================================
# Infrastructure
# =============================================================================


class InfrastructureException(KfkException):
    """Broker and network failures."""


class BrokerConnectionException(InfrastructureException):
    """The broker could not be reached."""
