"""Neo-Identity - validated entities and optimistic-concurrency persistence
for the NeoMultiTenant identity and access-management services.

Entities validate themselves before every mutation and carry tenant, audit
and version metadata. Repository adapters persist them through a
read-verify-write protocol over asyncpg or in-memory storage.
"""

from .__version__ import __version__

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .config import IdentitySettings, get_settings, LoggingConfig, get_logger

from .core.exceptions import (
    NeoIdentityError,
    InvalidArgumentError,
    ConfigurationError,
    RepositoryError,
    ConcurrencyConflictError,
)

from .core.shared import (
    Clock,
    SystemClock,
    FixedClock,
    CancellationToken,
    ExecutionContext,
    Message,
    MessageLevel,
)

from .core.value_objects import TenantInfo, RegistryVersion

from .core.entities import EntityBase, EntityBaseMetadata, EntityInfo

from .features.pagination import PaginationInfo

from .features.persistence import (
    DataModelBase,
    DataModelMapper,
    DataModelRepository,
    EntityRepository,
    InMemoryDataModelRepository,
    AsyncpgDataModelRepository,
    DatabaseManager,
)

__all__ = [
    "__version__",
    # Configuration
    "IdentitySettings",
    "get_settings",
    "LoggingConfig",
    "get_logger",
    # Exceptions
    "NeoIdentityError",
    "InvalidArgumentError",
    "ConfigurationError",
    "RepositoryError",
    "ConcurrencyConflictError",
    # Execution context
    "Clock",
    "SystemClock",
    "FixedClock",
    "CancellationToken",
    "ExecutionContext",
    "Message",
    "MessageLevel",
    # Entities and value objects
    "TenantInfo",
    "RegistryVersion",
    "EntityBase",
    "EntityBaseMetadata",
    "EntityInfo",
    # Persistence
    "PaginationInfo",
    "DataModelBase",
    "DataModelMapper",
    "DataModelRepository",
    "EntityRepository",
    "InMemoryDataModelRepository",
    "AsyncpgDataModelRepository",
    "DatabaseManager",
]
