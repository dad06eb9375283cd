"""
crowdfunding-api/api/schemas.py
Schémas Pydantic de sérialisation (documentation OpenAPI et contrôle des réponses)
"""

from typing import Dict, Generic, List, Optional, TypeVar
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from application.results import ErrorCode
from domain.entities import ProjectStatus

T = TypeVar("T")

# ============================================================================
# ENVELOPPE
# ============================================================================

class ErrorResponse(BaseModel):
    message: str
    code: Optional[ErrorCode] = None
    details: Optional[Dict[str, str]] = None


class ApiResponse(BaseModel, Generic[T]):
    """Enveloppe commune à toutes les réponses : {success, data, error}"""
    success: bool
    data: Optional[T] = None
    error: Optional[ErrorResponse] = None

# ============================================================================
# PROJETS
# ============================================================================

class ProjectResponse(BaseModel):
    """Schéma pour retourner un projet"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    goal: float
    image_url: Optional[str] = None
    status: ProjectStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectWithStatsResponse(ProjectResponse):
    """Projet et agrégats de ses contributions"""
    total_raised: float = 0
    total_contributors: int = 0
    progress_percentage: float = 0
    is_funded: bool = False


class PaginationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    page: int
    page_size: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class PaginatedProjectsResponse(BaseModel):
    data: List[ProjectWithStatsResponse] = Field(default_factory=list)
    pagination: PaginationResponse

# ============================================================================
# CONTRIBUTIONS
# ============================================================================

class ContributionResponse(BaseModel):
    """Schéma pour retourner une contribution"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    donor_name: str
    donor_email: Optional[str] = None
    amount: float
    message: Optional[str] = None
    created_at: Optional[datetime] = None


class ContributionStatsResponse(BaseModel):
    total_amount: float
    total_count: int
    average_amount: float
    largest_contribution: float


class ProjectDetailsResponse(BaseModel):
    """Projet avec la liste complète de ses contributions"""
    project: ProjectWithStatsResponse
    contributions: List[ContributionResponse] = Field(default_factory=list)

# ============================================================================
# PLATEFORME / IMAGES
# ============================================================================

class PlatformStatsResponse(BaseModel):
    total_projects: int
    active_projects: int
    total_funded: int
    total_contributions: int


class ImageUploadResponse(BaseModel):
    url: str
