"""Settings and the bootstrap container.

Quick start::

    from transport_spine.core.config import get_settings, TransportContainer

    settings = get_settings()
    print(settings.dsn)                # "mysql:"

    with TransportContainer() as c:
        c.build_extensions()
        factory = c.connection_factory

Architecture::

    settings.py       TransportSettings (pydantic-settings) + get_settings() cache
    container.py      TransportContainer (lazy factory, pool, slots) + get_container()
"""

from .container import (
    TransportContainer,
    get_container,
    reset_container,
)
from .settings import (
    TransportSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "TransportSettings",
    "get_settings",
    "clear_settings_cache",
    # Container
    "TransportContainer",
    "get_container",
    "reset_container",
]
