"""
Infrastructure Database - Configuration et repositories SQLAlchemy
"""

from infrastructure.database.session import SessionLocal, engine, build_engine
from infrastructure.database.models import Base, ProjectModel, ContributionModel
from infrastructure.database.repositories import (
    SQLAlchemyProjectRepository,
    SQLAlchemyContributionRepository
)

__all__ = [
    "Base",
    "engine",
    "build_engine",
    "SessionLocal",
    "ProjectModel",
    "ContributionModel",
    "SQLAlchemyProjectRepository",
    "SQLAlchemyContributionRepository"
]
