"""Persistence feature: generic repository adapter, mappers and storage collaborators."""

from .entities import DataModelBase, DataModelRepository, RowHandler, ItemHandler
from .mappers import DataModelMapper
from .repositories import EntityRepository, InMemoryDataModelRepository, AsyncpgDataModelRepository
from .database import DatabaseManager

__all__ = [
    "DataModelBase",
    "DataModelRepository",
    "RowHandler",
    "ItemHandler",
    "DataModelMapper",
    "EntityRepository",
    "InMemoryDataModelRepository",
    "AsyncpgDataModelRepository",
    "DatabaseManager",
]
