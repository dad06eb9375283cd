"""
Entité Contribution - Modèle métier pour les dons
"""

from datetime import datetime
from typing import Optional
from dataclasses import dataclass


@dataclass
class Contribution:
    """Entité Contribution du domaine (immuable une fois créée)"""
    id: str
    project_id: str
    donor_name: str
    amount: float
    donor_email: Optional[str] = None
    message: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validation de l'entité"""
        if not self.project_id:
            raise ValueError("Contribution must reference a project")
        if self.amount is None or self.amount <= 0:
            raise ValueError("Contribution amount must be strictly positive")


@dataclass
class ContributionStats:
    """Statistiques agrégées des contributions d'un projet"""
    total_amount: float = 0.0
    total_count: int = 0
    average_amount: float = 0.0
    largest_contribution: float = 0.0
