"""
Implémentations des repositories SQLAlchemy
"""

import logging
from collections import namedtuple
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    DateTime, String, Text, case, distinct, func, insert, literal, literal_column,
    not_, or_, select
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from domain import constants
from domain.entities import (
    Project, ProjectWithStats, ProjectStatus, ProjectFilters, SortBy, SortOrder,
    Contribution, ContributionStats,
    PaginationParams, PaginationInfo, PaginatedResult
)
from domain.exceptions import RepositoryError
from domain.repositories import ProjectRepository, ContributionRepository
from infrastructure.database.models import ProjectModel, ContributionModel, Money
from infrastructure.database.mappers import ProjectMapper, ContributionMapper

logger = logging.getLogger(__name__)

UPDATABLE_PROJECT_FIELDS = {"title", "description", "goal", "image_url", "status"}

# Colonnes calculées de la projection "project_stats"
StatsColumns = namedtuple(
    "StatsColumns", ["total_raised", "total_contributors", "progress_percentage", "is_funded"]
)


@contextmanager
def database_errors(session: Session, action: str):
    """Annule la transaction et convertit les erreurs SQLAlchemy en RepositoryError"""
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error {action}: {e}")
        raise RepositoryError(f"Error {action}") from e


class SQLAlchemyProjectRepository(ProjectRepository):
    """Implémentation SQLAlchemy du ProjectRepository"""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Projection projet + statistiques
    # ------------------------------------------------------------------

    def _stats_query(self):
        """
        Projets joints (LEFT JOIN) aux totaux de leurs contributions.
        Retourne la requête et les expressions calculées, réutilisables
        pour filtrer et trier.
        """
        totals = (
            self.session.query(
                ContributionModel.project_id.label("project_id"),
                func.sum(ContributionModel.amount).label("total_raised"),
                func.count(distinct(ContributionModel.donor_name)).label("total_contributors")
            )
            .group_by(ContributionModel.project_id)
            .subquery("contribution_totals")
        )

        total_raised = func.coalesce(totals.c.total_raised, 0)
        total_contributors = func.coalesce(totals.c.total_contributors, 0)

        # Littéraux décimaux pour éviter la division entière sous SQLite
        ratio = total_raised * literal_column("100.0") / ProjectModel.goal
        rounded = func.round(ratio * literal_column("10")) / literal_column("10.0")
        progress = case(
            (ProjectModel.goal <= 0, literal_column("0")),
            (rounded >= 100, literal_column("100")),
            else_=rounded
        )
        columns = StatsColumns(
            total_raised=total_raised,
            total_contributors=total_contributors,
            progress_percentage=progress,
            is_funded=progress >= 100
        )

        query = (
            self.session.query(
                ProjectModel,
                columns.total_raised.label("total_raised"),
                columns.total_contributors.label("total_contributors"),
                columns.progress_percentage.label("progress_percentage"),
                columns.is_funded.label("is_funded")
            )
            .outerjoin(totals, totals.c.project_id == ProjectModel.id)
        )
        return query, columns

    @staticmethod
    def _apply_filters(query: Query, columns: StatsColumns, filters: Optional[ProjectFilters]) -> Query:
        if not filters:
            return query

        if filters.status:
            query = query.filter(ProjectModel.status == ProjectStatus(filters.status).value)
        if filters.is_funded is not None:
            query = query.filter(columns.is_funded if filters.is_funded else not_(columns.is_funded))
        if filters.min_goal is not None:
            query = query.filter(ProjectModel.goal >= filters.min_goal)
        if filters.max_goal is not None:
            query = query.filter(ProjectModel.goal <= filters.max_goal)
        if filters.search:
            # Sous-chaîne littérale : % et _ ne sont pas des jokers
            query = query.filter(
                or_(
                    ProjectModel.title.icontains(filters.search, autoescape=True),
                    ProjectModel.description.icontains(filters.search, autoescape=True)
                )
            )
        return query

    @staticmethod
    def _apply_sort(query: Query, columns: StatsColumns, sort_by: SortBy, sort_order: SortOrder) -> Query:
        # Table de correspondance explicite : aucune colonne arbitraire n'est triable
        sort_columns = {
            SortBy.DATE: ProjectModel.created_at,
            SortBy.PROGRESS: columns.progress_percentage,
            SortBy.AMOUNT: columns.total_raised
        }
        column = sort_columns[SortBy(sort_by)]
        ordered = column.asc() if SortOrder(sort_order) == SortOrder.ASC else column.desc()
        return query.order_by(ordered, ProjectModel.id)

    @staticmethod
    def _to_domain(rows) -> List[ProjectWithStats]:
        return [ProjectMapper.to_domain_with_stats(*row) for row in rows]

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def find_all(
        self,
        filters: Optional[ProjectFilters] = None,
        sort_by: SortBy = SortBy.DATE,
        sort_order: SortOrder = SortOrder.DESC
    ) -> List[ProjectWithStats]:
        """Retourne tous les projets filtrés et triés"""
        with database_errors(self.session, "fetching projects"):
            query, columns = self._stats_query()
            query = self._apply_filters(query, columns, filters)
            query = self._apply_sort(query, columns, sort_by, sort_order)
            return self._to_domain(query.all())

    def find_all_paginated(
        self,
        filters: Optional[ProjectFilters],
        sort_by: SortBy,
        sort_order: SortOrder,
        pagination: PaginationParams
    ) -> PaginatedResult[ProjectWithStats]:
        """Retourne une page de projets et les informations de pagination"""
        with database_errors(self.session, "fetching projects"):
            query, columns = self._stats_query()
            query = self._apply_filters(query, columns, filters)
            total_count = query.order_by(None).count()

            rows = (
                self._apply_sort(query, columns, sort_by, sort_order)
                .limit(pagination.page_size)
                .offset(pagination.offset)
                .all()
            )
            return PaginatedResult(
                data=self._to_domain(rows),
                pagination=PaginationInfo.build(pagination, total_count)
            )

    def find_by_id(self, project_id: str) -> Optional[ProjectWithStats]:
        """Trouve un projet (avec statistiques) par son ID"""
        with database_errors(self.session, "fetching project"):
            query, _ = self._stats_query()
            row = query.filter(ProjectModel.id == project_id).first()
            return ProjectMapper.to_domain_with_stats(*row) if row else None

    def find_by_id_simple(self, project_id: str) -> Optional[Project]:
        """Trouve un projet sans statistiques"""
        with database_errors(self.session, "fetching project"):
            model = self.session.query(ProjectModel).filter(ProjectModel.id == project_id).first()
            return ProjectMapper.to_domain(model) if model else None

    def count(self, filters: Optional[ProjectFilters] = None) -> int:
        """Compte les projets (filtre de statut uniquement)"""
        with database_errors(self.session, "counting projects"):
            query = self.session.query(func.count(ProjectModel.id))
            if filters and filters.status:
                query = query.filter(ProjectModel.status == ProjectStatus(filters.status).value)
            return query.scalar() or 0

    def _find_active(self, limit: int, order_by, *criteria) -> List[ProjectWithStats]:
        query, columns = self._stats_query()
        query = query.filter(ProjectModel.status == ProjectStatus.ACTIVE.value)
        for criterion in criteria:
            query = query.filter(criterion(columns))
        rows = query.order_by(order_by(columns), ProjectModel.id).limit(limit).all()
        return self._to_domain(rows)

    def find_popular(self, limit: int = 5) -> List[ProjectWithStats]:
        """Projets actifs ayant le plus de contributeurs"""
        with database_errors(self.session, "fetching popular projects"):
            return self._find_active(limit, lambda c: c.total_contributors.desc())

    def find_recent(self, limit: int = 5) -> List[ProjectWithStats]:
        """Projets actifs les plus récents"""
        with database_errors(self.session, "fetching recent projects"):
            return self._find_active(limit, lambda c: ProjectModel.created_at.desc())

    def find_almost_funded(self, limit: int = 5) -> List[ProjectWithStats]:
        """Projets actifs entre le seuil "presque financé" et 100 %"""
        with database_errors(self.session, "fetching almost funded projects"):
            return self._find_active(
                limit,
                lambda c: c.progress_percentage.desc(),
                lambda c: c.progress_percentage >= constants.ALMOST_FUNDED_THRESHOLD,
                lambda c: c.progress_percentage < 100
            )

    # ------------------------------------------------------------------
    # Écriture
    # ------------------------------------------------------------------

    def create(self, project: Project) -> Project:
        """Insère un nouveau projet"""
        model = ProjectMapper.to_model(project)
        with database_errors(self.session, "creating project"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
            return ProjectMapper.to_domain(model)

    def update(self, project_id: str, changes: Dict[str, Any]) -> Project:
        """Fusionne les champs fournis et horodate la mise à jour"""
        with database_errors(self.session, "updating project"):
            model = self.session.query(ProjectModel).filter(ProjectModel.id == project_id).first()
            if not model:
                raise RepositoryError(f"Project '{project_id}' does not exist")

            for key, value in changes.items():
                if key not in UPDATABLE_PROJECT_FIELDS:
                    continue
                if key == "status":
                    value = ProjectStatus(value).value
                setattr(model, key, value)
            model.updated_at = datetime.utcnow()

            self.session.commit()
            self.session.refresh(model)
            return ProjectMapper.to_domain(model)

    def delete(self, project_id: str) -> None:
        """Supprime un projet et ses contributions"""
        with database_errors(self.session, "deleting project"):
            model = self.session.query(ProjectModel).filter(ProjectModel.id == project_id).first()
            if model:
                self.session.delete(model)
                self.session.commit()


class SQLAlchemyContributionRepository(ContributionRepository):
    """Implémentation SQLAlchemy du ContributionRepository"""

    def __init__(self, session: Session):
        self.session = session

    def find_by_project_id(self, project_id: str) -> List[Contribution]:
        """Contributions d'un projet, les plus récentes d'abord"""
        with database_errors(self.session, "fetching contributions"):
            models = (
                self.session.query(ContributionModel)
                .filter(ContributionModel.project_id == project_id)
                .order_by(ContributionModel.created_at.desc())
                .all()
            )
            return [ContributionMapper.to_domain(model) for model in models]

    def find_by_id(self, contribution_id: str) -> Optional[Contribution]:
        """Trouve une contribution par son ID"""
        with database_errors(self.session, "fetching contribution"):
            model = self.session.query(ContributionModel).filter(
                ContributionModel.id == contribution_id
            ).first()
            return ContributionMapper.to_domain(model) if model else None

    def find_top_contributors(self, project_id: str, limit: int = 5) -> List[Contribution]:
        """Plus grosses contributions d'un projet"""
        with database_errors(self.session, "fetching top contributors"):
            models = (
                self.session.query(ContributionModel)
                .filter(ContributionModel.project_id == project_id)
                .order_by(ContributionModel.amount.desc())
                .limit(limit)
                .all()
            )
            return [ContributionMapper.to_domain(model) for model in models]

    def get_stats_by_project_id(self, project_id: str) -> ContributionStats:
        """Somme, nombre, moyenne et maximum des montants d'un projet"""
        with database_errors(self.session, "computing contribution stats"):
            total, count, average, largest = (
                self.session.query(
                    func.sum(ContributionModel.amount),
                    func.count(ContributionModel.id),
                    func.avg(ContributionModel.amount),
                    func.max(ContributionModel.amount)
                )
                .filter(ContributionModel.project_id == project_id)
                .one()
            )

        if not count:
            return ContributionStats()

        return ContributionStats(
            total_amount=float(total),
            total_count=int(count),
            average_amount=float(average),
            largest_contribution=float(largest)
        )

    def create(self, contribution: Contribution) -> Contribution:
        """Insère une contribution sans condition"""
        model = ContributionMapper.to_model(contribution)
        with database_errors(self.session, "creating contribution"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
            return ContributionMapper.to_domain(model)

    def create_if_project_active(self, contribution: Contribution) -> Optional[Contribution]:
        """
        INSERT ... SELECT ... FROM projects WHERE id = :project_id AND status = 'active'

        La garde et l'écriture forment une seule instruction : un projet clos
        entre la vérification du service et l'insertion ne reçoit rien.
        """
        values = (
            select(
                literal(contribution.id, String),
                literal(contribution.project_id, String),
                literal(contribution.donor_name, String),
                literal(contribution.donor_email, String),
                literal(contribution.amount, Money),
                literal(contribution.message, Text),
                literal(contribution.created_at or datetime.utcnow(), DateTime)
            )
            .select_from(ProjectModel)
            .where(
                ProjectModel.id == contribution.project_id,
                ProjectModel.status == ProjectStatus.ACTIVE.value
            )
        )
        statement = insert(ContributionModel).from_select(
            ["id", "project_id", "donor_name", "donor_email", "amount", "message", "created_at"],
            values
        )

        with database_errors(self.session, "creating contribution"):
            result = self.session.execute(statement)
            self.session.commit()

        if result.rowcount == 0:
            return None
        return self.find_by_id(contribution.id)

    def find_recent(self, limit: int = 10) -> List[Contribution]:
        """Dernières contributions, tous projets confondus"""
        with database_errors(self.session, "fetching recent contributions"):
            models = (
                self.session.query(ContributionModel)
                .order_by(ContributionModel.created_at.desc())
                .limit(limit)
                .all()
            )
            return [ContributionMapper.to_domain(model) for model in models]

    def count_by_project_id(self, project_id: str) -> int:
        """Nombre de contributions d'un projet"""
        with database_errors(self.session, "counting contributions"):
            return (
                self.session.query(func.count(ContributionModel.id))
                .filter(ContributionModel.project_id == project_id)
                .scalar()
            ) or 0
