"""
Dépendances FastAPI pour l'injection de services
"""

from typing import Generator
from sqlalchemy.orm import Session
from fastapi import Depends

from infrastructure.database.session import SessionLocal
from infrastructure.database.repositories import (
    SQLAlchemyProjectRepository,
    SQLAlchemyContributionRepository
)
from infrastructure.storage import LocalImageStorage
from application.services.project_service import ProjectService
from application.services.contribution_service import ContributionService
from application.services.image_service import ImageService
from config import Config

config = Config()


def get_db() -> Generator[Session, None, None]:
    """Dépendance pour obtenir une session de base de données"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_project_repository(db: Session = Depends(get_db)) -> SQLAlchemyProjectRepository:
    """Dépendance pour obtenir le ProjectRepository"""
    return SQLAlchemyProjectRepository(db)


def get_contribution_repository(db: Session = Depends(get_db)) -> SQLAlchemyContributionRepository:
    """Dépendance pour obtenir le ContributionRepository"""
    return SQLAlchemyContributionRepository(db)


def get_image_storage() -> LocalImageStorage:
    return LocalImageStorage(config.upload_dir, config.public_base_url)


def get_project_service(
    project_repository: SQLAlchemyProjectRepository = Depends(get_project_repository),
    contribution_repository: SQLAlchemyContributionRepository = Depends(get_contribution_repository),
    image_storage: LocalImageStorage = Depends(get_image_storage)
) -> ProjectService:
    """Dépendance pour obtenir le ProjectService"""
    return ProjectService(project_repository, contribution_repository, image_storage)


def get_contribution_service(
    contribution_repository: SQLAlchemyContributionRepository = Depends(get_contribution_repository),
    project_service: ProjectService = Depends(get_project_service)
) -> ContributionService:
    """Dépendance pour obtenir le ContributionService"""
    return ContributionService(contribution_repository, project_service)


def get_image_service(storage: LocalImageStorage = Depends(get_image_storage)) -> ImageService:
    """Dépendance pour obtenir l'ImageService"""
    return ImageService(storage, config.allowed_image_types, config.max_image_size_bytes)
