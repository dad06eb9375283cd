"""
Mappers - Conversion entre modèles SQLAlchemy et entités de domaine
"""

from typing import Optional
from infrastructure.database.models import ProjectModel, ContributionModel
from domain.entities import (
    Project, ProjectWithStats, ProjectStatus, Contribution
)


class ProjectMapper:
    """Mapper entre ProjectModel et Project"""

    @staticmethod
    def to_domain(model: ProjectModel) -> Project:
        """Convertit un ProjectModel en entité Project"""
        return Project(
            id=model.id,
            title=model.title,
            description=model.description,
            goal=float(model.goal),
            image_url=model.image_url,
            status=ProjectStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at
        )

    @staticmethod
    def to_domain_with_stats(
        model: ProjectModel,
        total_raised,
        total_contributors,
        progress_percentage,
        is_funded
    ) -> ProjectWithStats:
        """Convertit une ligne de la projection (projet + agrégats) en ProjectWithStats"""
        return ProjectWithStats(
            id=model.id,
            title=model.title,
            description=model.description,
            goal=float(model.goal),
            image_url=model.image_url,
            status=ProjectStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
            total_raised=float(total_raised or 0),
            total_contributors=int(total_contributors or 0),
            progress_percentage=float(progress_percentage or 0),
            is_funded=bool(is_funded)
        )

    @staticmethod
    def to_model(project: Project, model: Optional[ProjectModel] = None) -> ProjectModel:
        """Convertit une entité Project en ProjectModel"""
        if model is None:
            model = ProjectModel()

        model.id = project.id
        model.title = project.title
        model.description = project.description
        model.goal = project.goal
        model.image_url = project.image_url
        model.status = project.status.value
        model.created_at = project.created_at
        model.updated_at = project.updated_at

        return model


class ContributionMapper:
    """Mapper entre ContributionModel et Contribution"""

    @staticmethod
    def to_domain(model: ContributionModel) -> Contribution:
        """Convertit un ContributionModel en entité Contribution"""
        return Contribution(
            id=model.id,
            project_id=model.project_id,
            donor_name=model.donor_name,
            donor_email=model.donor_email,
            amount=float(model.amount),
            message=model.message,
            created_at=model.created_at
        )

    @staticmethod
    def to_model(contribution: Contribution) -> ContributionModel:
        """Convertit une entité Contribution en ContributionModel"""
        return ContributionModel(
            id=contribution.id,
            project_id=contribution.project_id,
            donor_name=contribution.donor_name,
            donor_email=contribution.donor_email,
            amount=contribution.amount,
            message=contribution.message,
            created_at=contribution.created_at
        )
