"""Fixtures partagées : repositories en mémoire et base SQLite en mémoire."""

import os
import tempfile

# Doit précéder tout import de config : aucune base PostgreSQL pendant les tests
os.environ.setdefault("CROWDFUNDING_DATABASE_URL", "sqlite://")
os.environ.setdefault("CROWDFUNDING_UPLOAD_DIR", tempfile.mkdtemp(prefix="crowdfunding-uploads-"))

import dataclasses
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from domain.entities import (
    Project, ProjectWithStats, ProjectStatus, ProjectFilters, SortBy, SortOrder,
    Contribution, ContributionStats, PaginationParams, PaginationInfo, PaginatedResult,
    calculate_progress
)
from domain import constants
from domain.repositories import ProjectRepository, ContributionRepository
from application.services import ProjectService, ContributionService
from infrastructure.database.models import Base


class InMemoryStore:
    """Données partagées par les deux repositories en mémoire."""

    def __init__(self) -> None:
        self.projects: Dict[str, Project] = {}
        self.contributions: List[Contribution] = []


class InMemoryProjectRepository(ProjectRepository):
    """Implémentation en mémoire de ProjectRepository pour les tests."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def _with_stats(self, project: Project) -> ProjectWithStats:
        contributions = [c for c in self.store.contributions if c.project_id == project.id]
        total_raised = sum(c.amount for c in contributions)
        progress = calculate_progress(total_raised, project.goal)
        return ProjectWithStats(
            **dataclasses.asdict(project),
            total_raised=total_raised,
            total_contributors=len({c.donor_name for c in contributions}),
            progress_percentage=progress,
            is_funded=progress >= 100
        )

    def _matches(self, project: ProjectWithStats, filters: Optional[ProjectFilters]) -> bool:
        if not filters:
            return True
        if filters.status and project.status != filters.status:
            return False
        if filters.is_funded is not None and project.is_funded != filters.is_funded:
            return False
        if filters.min_goal is not None and project.goal < filters.min_goal:
            return False
        if filters.max_goal is not None and project.goal > filters.max_goal:
            return False
        if filters.search:
            term = filters.search.lower()
            if term not in project.title.lower() and term not in project.description.lower():
                return False
        return True

    def find_all(self, filters=None, sort_by=SortBy.DATE, sort_order=SortOrder.DESC) -> List[ProjectWithStats]:
        keys = {
            SortBy.DATE: lambda p: p.created_at,
            SortBy.PROGRESS: lambda p: p.progress_percentage,
            SortBy.AMOUNT: lambda p: p.total_raised,
        }
        projects = [self._with_stats(p) for p in self.store.projects.values()]
        projects = [p for p in projects if self._matches(p, filters)]
        return sorted(projects, key=keys[sort_by], reverse=sort_order == SortOrder.DESC)

    def find_all_paginated(self, filters, sort_by, sort_order, pagination: PaginationParams) -> PaginatedResult[ProjectWithStats]:
        projects = self.find_all(filters, sort_by, sort_order)
        page = projects[pagination.offset:pagination.offset + pagination.page_size]
        return PaginatedResult(data=page, pagination=PaginationInfo.build(pagination, len(projects)))

    def find_by_id(self, project_id: str) -> Optional[ProjectWithStats]:
        project = self.store.projects.get(project_id)
        return self._with_stats(project) if project else None

    def find_by_id_simple(self, project_id: str) -> Optional[Project]:
        return self.store.projects.get(project_id)

    def create(self, project: Project) -> Project:
        self.store.projects[project.id] = project
        return project

    def update(self, project_id: str, changes: Dict[str, Any]) -> Project:
        updated = dataclasses.replace(
            self.store.projects[project_id], **changes, updated_at=datetime.utcnow()
        )
        self.store.projects[project_id] = updated
        return updated

    def delete(self, project_id: str) -> None:
        self.store.projects.pop(project_id, None)
        self.store.contributions = [c for c in self.store.contributions if c.project_id != project_id]

    def count(self, filters: Optional[ProjectFilters] = None) -> int:
        status = filters.status if filters else None
        return len([p for p in self.store.projects.values() if not status or p.status == status])

    def _active(self) -> List[ProjectWithStats]:
        return [p for p in self.find_all() if p.status == ProjectStatus.ACTIVE]

    def find_popular(self, limit: int = 5) -> List[ProjectWithStats]:
        return sorted(self._active(), key=lambda p: p.total_contributors, reverse=True)[:limit]

    def find_recent(self, limit: int = 5) -> List[ProjectWithStats]:
        return self._active()[:limit]

    def find_almost_funded(self, limit: int = 5) -> List[ProjectWithStats]:
        candidates = [
            p for p in self._active()
            if constants.ALMOST_FUNDED_THRESHOLD <= p.progress_percentage < 100
        ]
        return sorted(candidates, key=lambda p: p.progress_percentage, reverse=True)[:limit]


class InMemoryContributionRepository(ContributionRepository):
    """Implémentation en mémoire de ContributionRepository pour les tests."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def _for_project(self, project_id: str) -> List[Contribution]:
        return [c for c in self.store.contributions if c.project_id == project_id]

    def find_by_project_id(self, project_id: str) -> List[Contribution]:
        return sorted(self._for_project(project_id), key=lambda c: c.created_at, reverse=True)

    def find_by_id(self, contribution_id: str) -> Optional[Contribution]:
        return next((c for c in self.store.contributions if c.id == contribution_id), None)

    def find_top_contributors(self, project_id: str, limit: int = 5) -> List[Contribution]:
        return sorted(self._for_project(project_id), key=lambda c: c.amount, reverse=True)[:limit]

    def get_stats_by_project_id(self, project_id: str) -> ContributionStats:
        amounts = [c.amount for c in self._for_project(project_id)]
        if not amounts:
            return ContributionStats()
        return ContributionStats(
            total_amount=sum(amounts),
            total_count=len(amounts),
            average_amount=sum(amounts) / len(amounts),
            largest_contribution=max(amounts)
        )

    def create(self, contribution: Contribution) -> Contribution:
        self.store.contributions.append(contribution)
        return contribution

    def create_if_project_active(self, contribution: Contribution) -> Optional[Contribution]:
        project = self.store.projects.get(contribution.project_id)
        if not project or project.status != ProjectStatus.ACTIVE:
            return None
        return self.create(contribution)

    def find_recent(self, limit: int = 10) -> List[Contribution]:
        return sorted(self.store.contributions, key=lambda c: c.created_at, reverse=True)[:limit]

    def count_by_project_id(self, project_id: str) -> int:
        return len(self._for_project(project_id))


# ============================================================================
# FIXTURES
# ============================================================================

VALID_DESCRIPTION = "A long enough description for a crowdfunding project."


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def project_repository(store) -> InMemoryProjectRepository:
    return InMemoryProjectRepository(store)


@pytest.fixture
def contribution_repository(store) -> InMemoryContributionRepository:
    return InMemoryContributionRepository(store)


@pytest.fixture
def project_service(project_repository, contribution_repository) -> ProjectService:
    return ProjectService(project_repository, contribution_repository)


@pytest.fixture
def contribution_service(contribution_repository, project_service) -> ContributionService:
    return ContributionService(contribution_repository, project_service)


@pytest.fixture
def make_project():
    """Fabrique d'entités Project avec des dates croissantes."""
    base = datetime(2024, 1, 1)
    counter = {"n": 0}

    def _make(title: str = "Community garden", goal: float = 100000, **kwargs) -> Project:
        counter["n"] += 1
        created_at = kwargs.pop("created_at", base + timedelta(days=counter["n"]))
        return Project(
            id=kwargs.pop("id", str(uuid.uuid4())),
            title=title,
            description=kwargs.pop("description", VALID_DESCRIPTION),
            goal=goal,
            created_at=created_at,
            updated_at=created_at,
            **kwargs
        )

    return _make


@pytest.fixture
def make_contribution():
    """Fabrique d'entités Contribution."""
    base = datetime(2024, 6, 1)
    counter = {"n": 0}

    def _make(project_id: str, amount: float, donor_name: str = "Alice", **kwargs) -> Contribution:
        counter["n"] += 1
        return Contribution(
            id=kwargs.pop("id", str(uuid.uuid4())),
            project_id=project_id,
            donor_name=donor_name,
            amount=amount,
            created_at=kwargs.pop("created_at", base + timedelta(hours=counter["n"])),
            **kwargs
        )

    return _make


@pytest.fixture
def sqlite_engine():
    """Base SQLite en mémoire partagée par toutes les connexions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(bind=sqlite_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()
