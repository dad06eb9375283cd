"""
ContributionService - Service applicatif pour la gestion des contributions
"""

import logging
import uuid
from datetime import datetime
from typing import Any, List

from domain.entities.contribution import Contribution, ContributionStats
from domain.repositories.contribution_repository import ContributionRepository
from application.results import ErrorCode, ServiceResult
from application.services.project_service import ProjectService
from application.validation import validate_contribution_create

logger = logging.getLogger(__name__)

PROJECT_NOT_ACTIVE_MESSAGE = "This project can no longer receive contributions"


class ContributionService:
    """Service pour la gestion des contributions"""

    def __init__(
        self,
        contribution_repository: ContributionRepository,
        project_service: ProjectService
    ):
        self.contribution_repository = contribution_repository
        self.project_service = project_service

    def create_contribution(self, data: Any) -> ServiceResult[Contribution]:
        """Valide puis enregistre une contribution sur un projet actif"""
        validation = validate_contribution_create(data)
        if not validation.success:
            return ServiceResult.invalid(validation.errors)

        payload = validation.data
        project_id = str(payload.project_id)

        if not self.project_service.can_receive_contributions(project_id):
            return ServiceResult.fail(PROJECT_NOT_ACTIVE_MESSAGE, code=ErrorCode.PROJECT_NOT_ACTIVE)

        try:
            contribution = Contribution(
                id=str(uuid.uuid4()),
                project_id=project_id,
                donor_name=payload.donor_name,
                donor_email=payload.donor_email,
                amount=payload.amount,
                message=payload.message,
                created_at=datetime.utcnow()
            )
            # Le statut est revérifié par l'insertion conditionnelle elle-même
            created = self.contribution_repository.create_if_project_active(contribution)
        except Exception as e:
            return ServiceResult.from_exception(e, "creating contribution")

        if created is None:
            logger.warning(f"[{project_id}] Project left 'active' before the contribution was stored")
            return ServiceResult.fail(PROJECT_NOT_ACTIVE_MESSAGE, code=ErrorCode.PROJECT_NOT_ACTIVE)

        logger.info(f"[{project_id}] Contribution {created.id} recorded: {created.amount}")
        return ServiceResult.ok(created)

    def get_project_contributions(self, project_id: str) -> ServiceResult[List[Contribution]]:
        try:
            return ServiceResult.ok(self.contribution_repository.find_by_project_id(project_id))
        except Exception as e:
            return ServiceResult.from_exception(e, "listing contributions")

    def get_project_contribution_stats(self, project_id: str) -> ServiceResult[ContributionStats]:
        try:
            return ServiceResult.ok(self.contribution_repository.get_stats_by_project_id(project_id))
        except Exception as e:
            return ServiceResult.from_exception(e, "computing contribution stats")

    def get_top_contributors(self, project_id: str, limit: int = 5) -> ServiceResult[List[Contribution]]:
        try:
            return ServiceResult.ok(
                self.contribution_repository.find_top_contributors(project_id, limit)
            )
        except Exception as e:
            return ServiceResult.from_exception(e, "listing top contributors")

    def get_recent_contributions(self, limit: int = 10) -> ServiceResult[List[Contribution]]:
        try:
            return ServiceResult.ok(self.contribution_repository.find_recent(limit))
        except Exception as e:
            return ServiceResult.from_exception(e, "listing recent contributions")
