"""Repository adapter and storage collaborators."""

from .entity_repository import EntityRepository
from .memory_data_model_repository import InMemoryDataModelRepository
from .asyncpg_data_model_repository import AsyncpgDataModelRepository

__all__ = [
    "EntityRepository",
    "InMemoryDataModelRepository",
    "AsyncpgDataModelRepository",
]
