"""
Interface ContributionRepository - Définit les opérations d'accès aux données pour Contribution
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from domain.entities.contribution import Contribution, ContributionStats


class ContributionRepository(ABC):
    """Interface pour le repository des contributions (journal en ajout seul)"""

    @abstractmethod
    def find_by_project_id(self, project_id: str) -> List[Contribution]:
        """Contributions d'un projet, les plus récentes d'abord"""
        pass

    @abstractmethod
    def find_by_id(self, contribution_id: str) -> Optional[Contribution]:
        """Trouve une contribution par son ID"""
        pass

    @abstractmethod
    def find_top_contributors(self, project_id: str, limit: int = 5) -> List[Contribution]:
        """Plus grosses contributions d'un projet"""
        pass

    @abstractmethod
    def get_stats_by_project_id(self, project_id: str) -> ContributionStats:
        """Statistiques des contributions d'un projet (zéros si aucune)"""
        pass

    @abstractmethod
    def create(self, contribution: Contribution) -> Contribution:
        """Insère une contribution sans condition"""
        pass

    @abstractmethod
    def create_if_project_active(self, contribution: Contribution) -> Optional[Contribution]:
        """
        Insère la contribution uniquement si le projet référencé est actif,
        en une seule instruction. Retourne None si rien n'a été inséré.
        """
        pass

    @abstractmethod
    def find_recent(self, limit: int = 10) -> List[Contribution]:
        """Dernières contributions, tous projets confondus"""
        pass

    @abstractmethod
    def count_by_project_id(self, project_id: str) -> int:
        """Nombre de contributions d'un projet"""
        pass
