"""Broker client adapters.

Import concrete adapter types from their modules::

    from kfk.adapters.kafka import KafkaBrokerClient
    from kfk.adapters.memory import InMemoryBrokerClient
"""
