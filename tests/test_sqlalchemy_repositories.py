"""Tests des repositories SQLAlchemy sur une base SQLite en mémoire."""

import uuid

import pytest

from domain.entities import (
    ProjectFilters, ProjectStatus, SortBy, SortOrder, PaginationParams
)
from domain.exceptions import RepositoryError
from infrastructure.database.models import Base, ContributionModel
from infrastructure.database.repositories import (
    SQLAlchemyProjectRepository,
    SQLAlchemyContributionRepository
)


@pytest.fixture
def projects(db_session):
    return SQLAlchemyProjectRepository(db_session)


@pytest.fixture
def contributions(db_session):
    return SQLAlchemyContributionRepository(db_session)


@pytest.fixture
def seeded(projects, contributions, make_project, make_contribution):
    """
    garden  : 100 000, 75 000 levés par deux donateurs (75 %)
    library :   1 000, financé à 100 %
    bikes   :   5 000, aucune contribution, annulé
    """
    garden = projects.create(make_project("Community garden", 100000))
    library = projects.create(make_project("Village library", 1000, description="Books and a reading room for children."))
    bikes = projects.create(make_project("Shared bikes", 5000, status=ProjectStatus.CANCELLED))

    contributions.create(make_contribution(garden.id, 30000, donor_name="Alice"))
    contributions.create(make_contribution(garden.id, 45000, donor_name="Bob"))
    contributions.create(make_contribution(library.id, 600, donor_name="Alice"))
    contributions.create(make_contribution(library.id, 400, donor_name="Alice"))
    return {"garden": garden, "library": library, "bikes": bikes}


def test_find_by_id_computes_stats(projects, seeded):
    garden = projects.find_by_id(seeded["garden"].id)

    assert garden.total_raised == 75000
    assert garden.total_contributors == 2
    assert garden.progress_percentage == 75
    assert garden.is_funded is False


def test_contributors_are_counted_by_distinct_name(projects, seeded):
    library = projects.find_by_id(seeded["library"].id)

    assert library.total_contributors == 1
    assert library.progress_percentage == 100
    assert library.is_funded is True


def test_project_without_contributions_has_zero_stats(projects, seeded):
    bikes = projects.find_by_id(seeded["bikes"].id)

    assert bikes.total_raised == 0
    assert bikes.total_contributors == 0
    assert bikes.progress_percentage == 0
    assert bikes.status == ProjectStatus.CANCELLED


def test_find_by_id_unknown(projects):
    assert projects.find_by_id(str(uuid.uuid4())) is None
    assert projects.find_by_id_simple(str(uuid.uuid4())) is None


def test_progress_is_rounded_to_one_decimal(projects, contributions, make_project, make_contribution):
    project = projects.create(make_project("Rounding check", 1000))
    contributions.create(make_contribution(project.id, 333))

    assert projects.find_by_id(project.id).progress_percentage == 33.3


@pytest.mark.parametrize("filters, expected", [
    (ProjectFilters(status=ProjectStatus.ACTIVE), {"garden", "library"}),
    (ProjectFilters(is_funded=True), {"library"}),
    (ProjectFilters(is_funded=False), {"garden", "bikes"}),
    (ProjectFilters(min_goal=5000), {"garden", "bikes"}),
    (ProjectFilters(max_goal=5000), {"library", "bikes"}),
    (ProjectFilters(search="READING"), {"library"}),
    (ProjectFilters(search="garden"), {"garden"}),
])
def test_find_all_filters(projects, seeded, filters, expected):
    ids = {p.id for p in projects.find_all(filters)}

    assert ids == {seeded[name].id for name in expected}


@pytest.mark.parametrize("sort_by, sort_order, expected", [
    (SortBy.DATE, SortOrder.DESC, ["bikes", "library", "garden"]),
    (SortBy.DATE, SortOrder.ASC, ["garden", "library", "bikes"]),
    (SortBy.PROGRESS, SortOrder.DESC, ["library", "garden", "bikes"]),
    (SortBy.AMOUNT, SortOrder.DESC, ["garden", "library", "bikes"]),
    (SortBy.AMOUNT, SortOrder.ASC, ["bikes", "library", "garden"]),
])
def test_find_all_sorting(projects, seeded, sort_by, sort_order, expected):
    ids = [p.id for p in projects.find_all(None, sort_by, sort_order)]

    assert ids == [seeded[name].id for name in expected]


def test_pagination(projects, seeded):
    page = projects.find_all_paginated(None, SortBy.DATE, SortOrder.ASC, PaginationParams(page=2, page_size=2))

    assert [p.id for p in page.data] == [seeded["bikes"].id]
    assert page.pagination.total_count == 3
    assert page.pagination.total_pages == 2
    assert not page.pagination.has_next_page
    assert page.pagination.has_previous_page


def test_pagination_beyond_last_page(projects, seeded):
    page = projects.find_all_paginated(
        ProjectFilters(status=ProjectStatus.ACTIVE), SortBy.DATE, SortOrder.DESC,
        PaginationParams(page=4, page_size=2)
    )

    assert page.data == []
    assert page.pagination.total_count == 2
    assert not page.pagination.has_next_page


def test_count(projects, seeded):
    assert projects.count() == 3
    assert projects.count(ProjectFilters(status=ProjectStatus.ACTIVE)) == 2


def test_listings(projects, contributions, seeded, make_project, make_contribution):
    almost = projects.create(make_project("Almost funded", 1000))
    contributions.create(make_contribution(almost.id, 800))

    # 80 % puis 75 % (seuil inclus), le projet financé est exclu
    assert [p.id for p in projects.find_almost_funded()] == [almost.id, seeded["garden"].id]
    assert projects.find_popular(limit=1)[0].id == seeded["garden"].id
    assert [p.id for p in projects.find_recent(limit=2)] == [almost.id, seeded["library"].id]


def test_update_merges_and_stamps(projects, seeded):
    garden = seeded["garden"]

    updated = projects.update(garden.id, {"status": ProjectStatus.COMPLETED, "image_url": None, "id": "ignored"})

    assert updated.id == garden.id
    assert updated.status == ProjectStatus.COMPLETED
    assert updated.title == garden.title
    assert updated.updated_at > garden.updated_at


def test_update_unknown_project_raises(projects):
    with pytest.raises(RepositoryError):
        projects.update(str(uuid.uuid4()), {"title": "Nothing here"})


def test_delete_cascades_to_contributions(projects, contributions, seeded, db_session):
    projects.delete(seeded["garden"].id)

    assert projects.find_by_id_simple(seeded["garden"].id) is None
    assert contributions.count_by_project_id(seeded["garden"].id) == 0
    assert db_session.query(ContributionModel).count() == 2


def test_conditional_insert_on_active_project(contributions, seeded, make_contribution):
    contribution = make_contribution(seeded["garden"].id, 1000, donor_name="Carol", message="Go!")

    created = contributions.create_if_project_active(contribution)

    assert created is not None
    assert created.id == contribution.id
    assert created.amount == 1000
    assert created.message == "Go!"
    assert contributions.count_by_project_id(seeded["garden"].id) == 3


def test_conditional_insert_on_cancelled_project(contributions, seeded, make_contribution):
    created = contributions.create_if_project_active(make_contribution(seeded["bikes"].id, 1000))

    assert created is None
    assert contributions.count_by_project_id(seeded["bikes"].id) == 0


def test_conditional_insert_on_unknown_project(contributions, make_contribution):
    assert contributions.create_if_project_active(make_contribution(str(uuid.uuid4()), 1000)) is None


def test_contribution_queries(contributions, seeded):
    garden_id = seeded["garden"].id

    listed = contributions.find_by_project_id(garden_id)
    top = contributions.find_top_contributors(garden_id, limit=1)
    stats = contributions.get_stats_by_project_id(garden_id)

    assert [c.donor_name for c in listed] == ["Bob", "Alice"]
    assert [c.amount for c in top] == [45000]
    assert stats.total_amount == 75000
    assert stats.total_count == 2
    assert stats.average_amount == 37500
    assert stats.largest_contribution == 45000
    assert len(contributions.find_recent(limit=3)) == 3


def test_stats_for_project_without_contributions(contributions, seeded):
    stats = contributions.get_stats_by_project_id(seeded["bikes"].id)

    assert (stats.total_amount, stats.total_count, stats.average_amount, stats.largest_contribution) == (0, 0, 0, 0)


def test_storage_failure_raises_repository_error(projects, sqlite_engine):
    Base.metadata.drop_all(bind=sqlite_engine)

    with pytest.raises(RepositoryError):
        projects.find_all()


@pytest.mark.parametrize("term", ["_", "%", "100%"])
def test_search_treats_wildcards_literally(projects, seeded, make_project, term):
    literal = projects.create(make_project("Trees_planting, 100% local"))

    found = [p.id for p in projects.find_all(ProjectFilters(search=term))]

    assert found == [literal.id]


def test_search_without_match_returns_nothing(projects, seeded):
    assert projects.find_all(ProjectFilters(search="_")) == []
