"""Entity <-> row mappers."""

from .base import DataModelMapper, entity_info_columns, entity_info_from_data_model

__all__ = [
    "DataModelMapper",
    "entity_info_columns",
    "entity_info_from_data_model",
]
