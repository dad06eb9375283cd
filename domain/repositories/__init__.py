"""
Repositories - Interfaces pour l'accès aux données
"""

from domain.repositories.project_repository import ProjectRepository
from domain.repositories.contribution_repository import ContributionRepository

__all__ = [
    "ProjectRepository",
    "ContributionRepository"
]
