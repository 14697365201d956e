"""Mapping-layer configuration for pystoremap.

The naming policy used by :func:`pystoremap.helpers.map_stores` lives
here. A configuration value can be passed explicitly to the helpers;
when it is not, the shared configuration is read at definition time, so
mappings built before :func:`set_map_store_suffix` keep their names.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any

from pystoremap.exceptions import StoreMapConfigError

_logger = logging.getLogger(__name__)

#: Suffix appended to a store id to build the name exposed by ``map_stores()``.
DEFAULT_STORE_SUFFIX: str = "_store"


@dataclasses.dataclass(frozen=True)
class MapHelpersConfig:
    """Mapping-layer configuration.

    Parameters
    ----------
    store_suffix : str
        Appended to the store id to derive the property name exposed by
        ``map_stores()``. Defaults to ``"_store"`` (``main`` becomes
        ``main_store``). An empty string exposes the bare store id.
    """

    store_suffix: str = DEFAULT_STORE_SUFFIX

    def __post_init__(self) -> None:
        if not isinstance(self.store_suffix, str):
            raise StoreMapConfigError(
                f"store_suffix must be a string, got {type(self.store_suffix).__name__}"
            )

    @classmethod
    def from_env(cls, **overrides: Any) -> MapHelpersConfig:
        """Create configuration from environment variables.

        Reads ``PYSTOREMAP_STORE_SUFFIX``. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MapHelpersConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PYSTOREMAP_STORE_SUFFIX": "store_suffix",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


_shared_config = MapHelpersConfig()


def get_config() -> MapHelpersConfig:
    """Return the shared configuration read by helpers given no explicit one."""
    return _shared_config


def configure(config: MapHelpersConfig) -> None:
    """Replace the shared configuration."""
    global _shared_config
    if not isinstance(config, MapHelpersConfig):
        raise StoreMapConfigError(f"expected MapHelpersConfig, got {type(config).__name__}")
    _shared_config = config


def reset_config() -> None:
    """Restore the default shared configuration."""
    configure(MapHelpersConfig())


def set_map_store_suffix(suffix: str) -> None:
    """Change the suffix used by subsequently defined ``map_stores()`` mappings."""
    configure(dataclasses.replace(_shared_config, store_suffix=suffix))
    _logger.debug("map_stores suffix set to %r", suffix)
