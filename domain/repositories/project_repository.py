"""
Interface ProjectRepository - Définit les opérations d'accès aux données pour Project
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from domain.entities.project import (
    Project, ProjectWithStats, ProjectFilters, SortBy, SortOrder
)
from domain.entities.pagination import PaginationParams, PaginatedResult


class ProjectRepository(ABC):
    """Interface pour le repository des projets"""

    @abstractmethod
    def find_all(
        self,
        filters: Optional[ProjectFilters] = None,
        sort_by: SortBy = SortBy.DATE,
        sort_order: SortOrder = SortOrder.DESC
    ) -> List[ProjectWithStats]:
        """Retourne tous les projets (avec statistiques) filtrés et triés"""
        pass

    @abstractmethod
    def find_all_paginated(
        self,
        filters: Optional[ProjectFilters],
        sort_by: SortBy,
        sort_order: SortOrder,
        pagination: PaginationParams
    ) -> PaginatedResult[ProjectWithStats]:
        """Comme find_all, restreint à une page"""
        pass

    @abstractmethod
    def find_by_id(self, project_id: str) -> Optional[ProjectWithStats]:
        """Trouve un projet (avec statistiques) par son ID"""
        pass

    @abstractmethod
    def find_by_id_simple(self, project_id: str) -> Optional[Project]:
        """Trouve un projet sans calculer ses statistiques"""
        pass

    @abstractmethod
    def create(self, project: Project) -> Project:
        """Insère un nouveau projet"""
        pass

    @abstractmethod
    def update(self, project_id: str, changes: Dict[str, Any]) -> Project:
        """Applique une mise à jour partielle (le projet doit exister)"""
        pass

    @abstractmethod
    def delete(self, project_id: str) -> None:
        """Supprime physiquement un projet"""
        pass

    @abstractmethod
    def count(self, filters: Optional[ProjectFilters] = None) -> int:
        """Compte les projets (seul le filtre de statut est pris en compte)"""
        pass

    @abstractmethod
    def find_popular(self, limit: int = 5) -> List[ProjectWithStats]:
        """Projets actifs ayant le plus de contributeurs"""
        pass

    @abstractmethod
    def find_recent(self, limit: int = 5) -> List[ProjectWithStats]:
        """Projets actifs les plus récents"""
        pass

    @abstractmethod
    def find_almost_funded(self, limit: int = 5) -> List[ProjectWithStats]:
        """Projets actifs proches de leur objectif (sans l'avoir atteint)"""
        pass
