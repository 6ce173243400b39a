"""kfk core: configuration loading and binding."""

from kfk.core.config import Config, config_properties

__all__ = ["Config", "config_properties"]
