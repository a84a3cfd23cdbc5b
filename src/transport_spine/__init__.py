"""
transport-spine - message transport bootstrap primitives.

- transport_spine.dbal: DSN normalization and the database connection factory
- transport_spine.extensions: per-transport consumption extension wiring
- transport_spine.core: errors, logging, settings, bootstrap container
"""

__version__ = "0.1.0"

from transport_spine.dbal import DbalConnectionFactory, normalize_config  # noqa: E402
from transport_spine.extensions import (  # noqa: E402
    BuildConsumptionExtensions,
    DescriptorPool,
    SlotStore,
)

__all__ = [
    "BuildConsumptionExtensions",
    "DbalConnectionFactory",
    "DescriptorPool",
    "SlotStore",
    "normalize_config",
]
