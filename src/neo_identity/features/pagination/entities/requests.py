"""Pagination request entities."""

import sys
from dataclasses import dataclass
from typing import Optional

from ....core.exceptions import InvalidArgumentError

UNBOUNDED_PAGE_SIZE = sys.maxsize


@dataclass(frozen=True)
class PaginationInfo:
    """Page-number pagination over a full scan.

    ``page`` is 1-based. ``PaginationInfo.all()`` requests every row in a
    single unbounded page.
    """

    page: int = 1
    page_size: int = 50

    def __post_init__(self):
        """Validate pagination parameters."""
        if not isinstance(self.page, int) or self.page < 1:
            raise InvalidArgumentError("page", f"must be >= 1, got {self.page}")
        if not isinstance(self.page_size, int) or self.page_size < 1:
            raise InvalidArgumentError("page_size", f"must be >= 1, got {self.page_size}")

    @classmethod
    def create(cls, page: int, page_size: int) -> "PaginationInfo":
        return cls(page=page, page_size=page_size)

    @classmethod
    def all(cls) -> "PaginationInfo":
        return cls(page=1, page_size=UNBOUNDED_PAGE_SIZE)

    @classmethod
    def create_from_existing_info(cls, page: int, page_size: int) -> "PaginationInfo":
        """Rebuild without validation, e.g. from a stored sync checkpoint."""
        instance = object.__new__(cls)
        object.__setattr__(instance, "page", page)
        object.__setattr__(instance, "page_size", page_size)
        return instance

    @property
    def index(self) -> int:
        """Zero-based page index."""
        return self.page - 1

    @property
    def offset(self) -> int:
        """Number of rows skipped before this page."""
        if self.is_unbounded:
            return 0
        return self.index * self.page_size

    @property
    def limit(self) -> Optional[int]:
        """Row limit for the page, or None when unbounded."""
        return None if self.is_unbounded else self.page_size

    @property
    def is_unbounded(self) -> bool:
        return self.page_size >= UNBOUNDED_PAGE_SIZE

    def next_page(self) -> "PaginationInfo":
        return PaginationInfo(page=self.page + 1, page_size=self.page_size)
