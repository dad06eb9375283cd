"""
Entité Project - Modèle métier pour les projets de financement
"""

import math
from datetime import datetime
from typing import Optional
from dataclasses import dataclass
from enum import Enum


class ProjectStatus(str, Enum):
    """Statut d'un projet"""
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SortBy(str, Enum):
    """Clés de tri exposées aux clients"""
    DATE = "date"
    PROGRESS = "progress"
    AMOUNT = "amount"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def calculate_progress(raised: float, goal: float) -> float:
    """
    Pourcentage de financement arrondi au dixième, plafonné à 100.
    Un objectif nul donne 0.
    """
    if goal == 0:
        return 0
    # Arrondi "half up" (pas d'arrondi bancaire)
    progress = math.floor(raised / goal * 1000 + 0.5) / 10
    return min(progress, 100)


@dataclass
class Project:
    """Entité Project du domaine"""
    id: str
    title: str
    description: str
    goal: float
    image_url: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validation de l'entité"""
        if not self.title:
            raise ValueError("Project title cannot be empty")
        if self.goal is None or self.goal <= 0:
            raise ValueError("Project goal must be strictly positive")
        if isinstance(self.status, str):
            self.status = ProjectStatus(self.status)

    def can_receive_contributions(self) -> bool:
        """Seuls les projets actifs acceptent des contributions"""
        return self.status == ProjectStatus.ACTIVE


@dataclass
class ProjectWithStats(Project):
    """Projet enrichi de ses statistiques (projection en lecture seule)"""
    total_raised: float = 0.0
    total_contributors: int = 0
    progress_percentage: float = 0.0
    is_funded: bool = False


@dataclass
class ProjectFilters:
    """Filtres de recherche des projets (None = pas de contrainte)"""
    status: Optional[ProjectStatus] = None
    is_funded: Optional[bool] = None
    min_goal: Optional[float] = None
    max_goal: Optional[float] = None
    search: Optional[str] = None
