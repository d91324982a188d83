"""Pagination entities."""

from .requests import PaginationInfo, UNBOUNDED_PAGE_SIZE

__all__ = ["PaginationInfo", "UNBOUNDED_PAGE_SIZE"]
