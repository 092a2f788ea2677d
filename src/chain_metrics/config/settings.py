"""
Process-wide configuration access.

Loads the ConfigState lazily on first use so importing the package never
touches the filesystem or environment. Components receive explicit config
objects; only composition roots (API lifespan, CLI) call get_settings().
"""

import logging
from functools import lru_cache

from chain_metrics.config.state import ConfigState, get_config

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> ConfigState:
    """Initialize configuration state with graceful degradation."""
    try:
        return get_config()
    except Exception as e:
        logger.error(f"Failed to initialize configuration: {e}")
        logger.warning("Using minimal default configuration")
        return ConfigState()


def reset_settings() -> None:
    """Drop the cached configuration so the next access reloads it."""
    get_settings.cache_clear()
