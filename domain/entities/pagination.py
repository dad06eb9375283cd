"""
Pagination par offset (pages numérotées à partir de 1)
"""

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass
class PaginationParams:
    page: int = 1
    page_size: int = 12

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("Page must be >= 1")
        if self.page_size < 1:
            raise ValueError("Page size must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class PaginationInfo:
    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, params: PaginationParams, total_count: int) -> "PaginationInfo":
        total_pages = math.ceil(total_count / params.page_size)
        return cls(
            page=params.page,
            page_size=params.page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_next_page=params.page < total_pages,
            has_previous_page=params.page > 1
        )


@dataclass
class PaginatedResult(Generic[T]):
    pagination: PaginationInfo
    data: List[T] = field(default_factory=list)
