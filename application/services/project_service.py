"""
ProjectService - Service applicatif pour la gestion des projets
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from domain.entities.project import (
    Project, ProjectWithStats, ProjectStatus, ProjectFilters, SortBy, SortOrder
)
from domain.entities.pagination import PaginationParams, PaginatedResult
from domain.repositories.project_repository import ProjectRepository
from domain.repositories.contribution_repository import ContributionRepository
from domain.storage import ImageStorage
from application.results import ServiceResult
from application.validation import validate_project_create, validate_project_update

logger = logging.getLogger(__name__)


class ProjectService:
    """Service pour la gestion des projets"""

    def __init__(
        self,
        project_repository: ProjectRepository,
        contribution_repository: ContributionRepository,
        image_storage: Optional[ImageStorage] = None
    ):
        self.project_repository = project_repository
        self.contribution_repository = contribution_repository
        self.image_storage = image_storage

    @staticmethod
    def _not_found(project_id: str) -> ServiceResult:
        return ServiceResult.not_found(f"Project '{project_id}' not found")

    def _discard_image(self, image_url: Optional[str]) -> None:
        """Supprime une image devenue orpheline (ignorée si elle n'est pas stockée ici)"""
        if self.image_storage is None or not image_url:
            return
        if self.image_storage.delete(image_url):
            logger.info(f"Orphaned image removed: {image_url}")

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def get_all_projects(
        self,
        filters: Optional[ProjectFilters] = None,
        sort_by: SortBy = SortBy.DATE,
        sort_order: SortOrder = SortOrder.DESC
    ) -> ServiceResult[List[ProjectWithStats]]:
        """Récupère tous les projets avec filtres et tri"""
        try:
            return ServiceResult.ok(
                self.project_repository.find_all(filters, sort_by, sort_order)
            )
        except Exception as e:
            return ServiceResult.from_exception(e, "listing projects")

    def get_all_projects_paginated(
        self,
        filters: Optional[ProjectFilters] = None,
        sort_by: SortBy = SortBy.DATE,
        sort_order: SortOrder = SortOrder.DESC,
        pagination: Optional[PaginationParams] = None
    ) -> ServiceResult[PaginatedResult[ProjectWithStats]]:
        """Récupère une page de projets avec filtres et tri"""
        try:
            page = self.project_repository.find_all_paginated(
                filters, sort_by, sort_order, pagination or PaginationParams()
            )
            return ServiceResult.ok(page)
        except Exception as e:
            return ServiceResult.from_exception(e, "listing projects")

    def get_project_by_id(self, project_id: str) -> ServiceResult[ProjectWithStats]:
        """Récupère un projet (avec statistiques) par son ID"""
        try:
            project = self.project_repository.find_by_id(project_id)
            if not project:
                return self._not_found(project_id)
            return ServiceResult.ok(project)
        except Exception as e:
            return ServiceResult.from_exception(e, "fetching project")

    def get_project_with_contributions(self, project_id: str) -> ServiceResult[Dict[str, Any]]:
        """Récupère un projet et la liste complète de ses contributions"""
        try:
            project = self.project_repository.find_by_id(project_id)
            if not project:
                return self._not_found(project_id)

            contributions = self.contribution_repository.find_by_project_id(project_id)
            return ServiceResult.ok({
                "project": project,
                "contributions": contributions
            })
        except Exception as e:
            return ServiceResult.from_exception(e, "fetching project")

    def get_popular_projects(self, limit: int = 5) -> ServiceResult[List[ProjectWithStats]]:
        try:
            return ServiceResult.ok(self.project_repository.find_popular(limit))
        except Exception as e:
            return ServiceResult.from_exception(e, "listing popular projects")

    def get_recent_projects(self, limit: int = 5) -> ServiceResult[List[ProjectWithStats]]:
        try:
            return ServiceResult.ok(self.project_repository.find_recent(limit))
        except Exception as e:
            return ServiceResult.from_exception(e, "listing recent projects")

    def get_almost_funded_projects(self, limit: int = 5) -> ServiceResult[List[ProjectWithStats]]:
        try:
            return ServiceResult.ok(self.project_repository.find_almost_funded(limit))
        except Exception as e:
            return ServiceResult.from_exception(e, "listing almost funded projects")

    # ------------------------------------------------------------------
    # Écriture
    # ------------------------------------------------------------------

    def create_project(self, data: Any) -> ServiceResult[Project]:
        """Valide puis crée un projet (toujours actif à la création)"""
        validation = validate_project_create(data)
        if not validation.success:
            return ServiceResult.invalid(validation.errors)

        payload = validation.data
        now = datetime.utcnow()
        try:
            project = Project(
                id=str(uuid.uuid4()),
                title=payload.title,
                description=payload.description,
                goal=payload.goal,
                image_url=payload.image_url,
                status=ProjectStatus.ACTIVE,
                created_at=now,
                updated_at=now
            )
            created = self.project_repository.create(project)
            logger.info(f"✅ Project '{created.title}' created ({created.id})")
            return ServiceResult.ok(created)
        except Exception as e:
            return ServiceResult.from_exception(e, "creating project")

    def update_project(self, project_id: str, data: Any) -> ServiceResult[Project]:
        """
        Met à jour un projet.
        L'existence est vérifiée avant toute validation du contenu.
        """
        try:
            existing = self.project_repository.find_by_id_simple(project_id)
            if not existing:
                return self._not_found(project_id)

            validation = validate_project_update(data)
            if not validation.success:
                return ServiceResult.invalid(validation.errors)

            changes = validation.data.to_changes()
            updated = self.project_repository.update(project_id, changes)
            logger.info(f"[{project_id}] Project updated: {sorted(changes)}")
        except Exception as e:
            return ServiceResult.from_exception(e, "updating project")

        if existing.image_url != updated.image_url:
            self._discard_image(existing.image_url)
        return ServiceResult.ok(updated)

    def delete_project(self, project_id: str) -> ServiceResult[None]:
        """Supprime un projet (suppression physique)"""
        try:
            project = self.project_repository.find_by_id_simple(project_id)
            if not project:
                return self._not_found(project_id)

            self.project_repository.delete(project_id)
            logger.info(f"[{project_id}] Project deleted")
        except Exception as e:
            return ServiceResult.from_exception(e, "deleting project")

        self._discard_image(project.image_url)
        return ServiceResult.ok(None)

    # ------------------------------------------------------------------
    # Règles métier
    # ------------------------------------------------------------------

    def can_receive_contributions(self, project_id: str) -> bool:
        """Seuls les projets existants et actifs acceptent des contributions"""
        try:
            project = self.project_repository.find_by_id_simple(project_id)
        except Exception as e:
            logger.warning(f"[{project_id}] Status lookup failed, refusing contributions: {e}")
            return False

        return project is not None and project.can_receive_contributions()

    def get_platform_stats(self) -> ServiceResult[Dict[str, int]]:
        """
        Statistiques globales de la plateforme.

        Composées de plusieurs requêtes indépendantes : les compteurs peuvent
        être légèrement décalés entre eux sous écriture concurrente.
        """
        try:
            total_projects = self.project_repository.count()
            active_projects = self.project_repository.count(
                ProjectFilters(status=ProjectStatus.ACTIVE)
            )

            all_projects = self.project_repository.find_all()
            total_funded = sum(1 for p in all_projects if p.is_funded)
            total_contributions = sum(p.total_contributors for p in all_projects)

            return ServiceResult.ok({
                "total_projects": total_projects,
                "active_projects": active_projects,
                "total_funded": total_funded,
                "total_contributions": total_contributions
            })
        except Exception as e:
            return ServiceResult.from_exception(e, "computing platform stats")
