"""Persistence entities and protocols."""

from .data_model import DataModelBase, BASE_COLUMNS
from .protocols import DataModelRepository, RowHandler, ItemHandler

__all__ = [
    "DataModelBase",
    "BASE_COLUMNS",
    "DataModelRepository",
    "RowHandler",
    "ItemHandler",
]
