"""
crowdfunding-api/api/endpoints.py
Endpoints de l'API de financement participatif
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from api.schemas import (
    ApiResponse, ProjectResponse, ProjectDetailsResponse, ProjectWithStatsResponse,
    PaginatedProjectsResponse, ContributionResponse, ContributionStatsResponse,
    PlatformStatsResponse, ImageUploadResponse
)
from application.results import ErrorCode, ServiceResult
from application.services import ProjectService, ContributionService, ImageService
from domain.entities import (
    ProjectFilters, ProjectStatus, SortBy, SortOrder, PaginationParams
)
from infrastructure.dependencies import (
    get_project_service, get_contribution_service, get_image_service
)
from config import Config

config = Config()
logger = logging.getLogger(__name__)

projects_router = APIRouter(prefix="/projects", tags=["Projects"])
contributions_router = APIRouter(tags=["Contributions"])
stats_router = APIRouter(tags=["Statistics"])
uploads_router = APIRouter(prefix="/uploads", tags=["Uploads"])

STATUS_BY_ERROR_CODE = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PROJECT_NOT_ACTIVE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_IMAGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

LIMIT_QUERY = Query(5, ge=1, le=50)

# ============================================================================
# HELPERS
# ============================================================================

def to_response(result: ServiceResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Traduit un ServiceResult en réponse HTTP (enveloppe + statut)"""
    if result.success:
        status_code = success_status
    else:
        status_code = STATUS_BY_ERROR_CODE.get(result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(result))


def clamp_page_size(page_size: Optional[int]) -> int:
    if page_size is None:
        return config.default_page_size
    return max(1, min(page_size, config.max_page_size))

# ============================================================================
# PROJETS
# ============================================================================

@projects_router.get("", response_model=ApiResponse[PaginatedProjectsResponse])
def list_projects(
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    project_status: Optional[ProjectStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    sort_by: SortBy = Query(SortBy.DATE, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
    is_funded: Optional[bool] = Query(None, alias="isFunded"),
    min_goal: Optional[float] = Query(None, alias="minGoal"),
    max_goal: Optional[float] = Query(None, alias="maxGoal"),
    project_service: ProjectService = Depends(get_project_service)
):
    """Liste paginée des projets avec filtres et tri"""
    filters = ProjectFilters(
        status=project_status,
        is_funded=is_funded,
        min_goal=min_goal,
        max_goal=max_goal,
        search=search.strip() if search and search.strip() else None
    )
    pagination = PaginationParams(page=max(page, 1), page_size=clamp_page_size(page_size))
    return to_response(
        project_service.get_all_projects_paginated(filters, sort_by, sort_order, pagination)
    )


@projects_router.post("", response_model=ApiResponse[ProjectResponse], status_code=status.HTTP_201_CREATED)
def create_project(
    payload: Dict[str, Any] = Body(...),
    project_service: ProjectService = Depends(get_project_service)
):
    """Crée un projet (statut actif)"""
    return to_response(project_service.create_project(payload), status.HTTP_201_CREATED)


@projects_router.get("/popular", response_model=ApiResponse[List[ProjectWithStatsResponse]])
def list_popular_projects(
    limit: int = LIMIT_QUERY,
    project_service: ProjectService = Depends(get_project_service)
):
    """Projets actifs ayant le plus de contributeurs"""
    return to_response(project_service.get_popular_projects(limit))


@projects_router.get("/recent", response_model=ApiResponse[List[ProjectWithStatsResponse]])
def list_recent_projects(
    limit: int = LIMIT_QUERY,
    project_service: ProjectService = Depends(get_project_service)
):
    return to_response(project_service.get_recent_projects(limit))


@projects_router.get("/almost-funded", response_model=ApiResponse[List[ProjectWithStatsResponse]])
def list_almost_funded_projects(
    limit: int = LIMIT_QUERY,
    project_service: ProjectService = Depends(get_project_service)
):
    """Projets actifs proches de leur objectif"""
    return to_response(project_service.get_almost_funded_projects(limit))


@projects_router.get("/{project_id}", response_model=ApiResponse[ProjectDetailsResponse])
def get_project(
    project_id: str,
    project_service: ProjectService = Depends(get_project_service)
):
    """Détail d'un projet et de toutes ses contributions"""
    return to_response(project_service.get_project_with_contributions(project_id))


@projects_router.patch("/{project_id}", response_model=ApiResponse[ProjectResponse])
def update_project(
    project_id: str,
    payload: Dict[str, Any] = Body(...),
    project_service: ProjectService = Depends(get_project_service)
):
    """Mise à jour partielle d'un projet"""
    return to_response(project_service.update_project(project_id, payload))


@projects_router.delete("/{project_id}", response_model=ApiResponse[None])
def delete_project(
    project_id: str,
    project_service: ProjectService = Depends(get_project_service)
):
    """Supprime un projet et ses contributions"""
    return to_response(project_service.delete_project(project_id))


@projects_router.get("/{project_id}/contributions", response_model=ApiResponse[List[ContributionResponse]])
def list_project_contributions(
    project_id: str,
    contribution_service: ContributionService = Depends(get_contribution_service)
):
    return to_response(contribution_service.get_project_contributions(project_id))


@projects_router.get("/{project_id}/contributions/stats", response_model=ApiResponse[ContributionStatsResponse])
def get_project_contribution_stats(
    project_id: str,
    contribution_service: ContributionService = Depends(get_contribution_service)
):
    return to_response(contribution_service.get_project_contribution_stats(project_id))


@projects_router.get("/{project_id}/contributions/top", response_model=ApiResponse[List[ContributionResponse]])
def list_top_contributors(
    project_id: str,
    limit: int = LIMIT_QUERY,
    contribution_service: ContributionService = Depends(get_contribution_service)
):
    """Plus grosses contributions d'un projet"""
    return to_response(contribution_service.get_top_contributors(project_id, limit))

# ============================================================================
# CONTRIBUTIONS
# ============================================================================

@contributions_router.post(
    "/contributions",
    response_model=ApiResponse[ContributionResponse],
    status_code=status.HTTP_201_CREATED
)
def create_contribution(
    payload: Dict[str, Any] = Body(...),
    contribution_service: ContributionService = Depends(get_contribution_service)
):
    """Enregistre une contribution sur un projet actif"""
    return to_response(contribution_service.create_contribution(payload), status.HTTP_201_CREATED)


@contributions_router.get("/contributions/recent", response_model=ApiResponse[List[ContributionResponse]])
def list_recent_contributions(
    limit: int = Query(10, ge=1, le=50),
    contribution_service: ContributionService = Depends(get_contribution_service)
):
    return to_response(contribution_service.get_recent_contributions(limit))

# ============================================================================
# STATISTIQUES
# ============================================================================

@stats_router.get("/stats", response_model=ApiResponse[PlatformStatsResponse])
def get_platform_stats(project_service: ProjectService = Depends(get_project_service)):
    """Statistiques globales de la plateforme"""
    return to_response(project_service.get_platform_stats())

# ============================================================================
# IMAGES
# ============================================================================

@uploads_router.post(
    "/images",
    response_model=ApiResponse[ImageUploadResponse],
    status_code=status.HTTP_201_CREATED
)
def upload_image(
    file: UploadFile = File(...),
    project_id: Optional[str] = Form(None, alias="projectId"),
    image_service: ImageService = Depends(get_image_service)
):
    """Upload d'une image de projet, retourne son URL publique"""
    # Un octet de plus que la limite suffit à détecter un fichier trop gros
    content = file.file.read(image_service.max_size_bytes + 1)
    result = image_service.upload_project_image(
        filename=file.filename,
        content_type=file.content_type,
        content=content,
        project_id=project_id
    )
    return to_response(result, status.HTTP_201_CREATED)
