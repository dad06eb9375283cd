"""
Entités du domaine
"""

from domain.entities.project import (
    Project,
    ProjectWithStats,
    ProjectStatus,
    ProjectFilters,
    SortBy,
    SortOrder,
    calculate_progress
)
from domain.entities.contribution import Contribution, ContributionStats
from domain.entities.pagination import PaginationParams, PaginationInfo, PaginatedResult

__all__ = [
    "Project",
    "ProjectWithStats",
    "ProjectStatus",
    "ProjectFilters",
    "SortBy",
    "SortOrder",
    "calculate_progress",
    "Contribution",
    "ContributionStats",
    "PaginationParams",
    "PaginationInfo",
    "PaginatedResult"
]
