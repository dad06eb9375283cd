"""
Validation des entrées (projets, contributions, images) avec Pydantic.

Les validateurs ne lèvent jamais d'exception pour une donnée invalide : ils
retournent un ValidationResult contenant soit le modèle validé, soit un
dictionnaire {chemin du champ: message}.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Type, TypeVar
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter,
    ValidationError, field_validator
)
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from domain import constants
from domain.entities.project import ProjectStatus

M = TypeVar("M", bound=BaseModel)

_http_url_adapter = TypeAdapter(HttpUrl)


def _empty_to_none(value: Any) -> Any:
    """Une chaîne vide (champ de formulaire non rempli) équivaut à une absence"""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_url(value: Optional[str]) -> Optional[str]:
    # On valide le format mais on conserve la chaîne telle que fournie
    if value is None:
        return value
    try:
        _http_url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid image URL")
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    # Même principe : format vérifié, adresse conservée sans normalisation
    if value is None:
        return value
    try:
        validate_email(value)
    except PydanticCustomError:
        raise ValueError("Invalid email address")
    return value


# ============================================================================
# PROJETS
# ============================================================================

class ProjectCreateInput(BaseModel):
    """Données de création d'un projet"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(
        ...,
        min_length=constants.PROJECT_TITLE_MIN_LENGTH,
        max_length=constants.PROJECT_TITLE_MAX_LENGTH
    )
    description: str = Field(
        ...,
        min_length=constants.PROJECT_DESCRIPTION_MIN_LENGTH,
        max_length=constants.PROJECT_DESCRIPTION_MAX_LENGTH
    )
    goal: float = Field(..., strict=True, gt=0, ge=constants.PROJECT_GOAL_MIN, le=constants.PROJECT_GOAL_MAX)
    image_url: Optional[str] = None

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_image_url(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value)


class ProjectUpdateInput(BaseModel):
    """Mise à jour partielle d'un projet (tous les champs optionnels)"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = Field(
        None,
        min_length=constants.PROJECT_TITLE_MIN_LENGTH,
        max_length=constants.PROJECT_TITLE_MAX_LENGTH
    )
    description: Optional[str] = Field(
        None,
        min_length=constants.PROJECT_DESCRIPTION_MIN_LENGTH,
        max_length=constants.PROJECT_DESCRIPTION_MAX_LENGTH
    )
    goal: Optional[float] = Field(
        None, strict=True, gt=0, ge=constants.PROJECT_GOAL_MIN, le=constants.PROJECT_GOAL_MAX
    )
    image_url: Optional[str] = None
    status: Optional[ProjectStatus] = None

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_image_url(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value)

    def to_changes(self) -> Dict[str, Any]:
        """Champs effectivement fournis ; seule l'image peut être remise à NULL"""
        changes = self.model_dump(exclude_unset=True)
        return {
            key: value for key, value in changes.items()
            if value is not None or key == "image_url"
        }


# ============================================================================
# CONTRIBUTIONS
# ============================================================================

class ContributionCreateInput(BaseModel):
    """Données de création d'une contribution"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    project_id: UUID
    donor_name: str = Field(
        ...,
        min_length=constants.DONOR_NAME_MIN_LENGTH,
        max_length=constants.DONOR_NAME_MAX_LENGTH
    )
    donor_email: Optional[str] = None
    amount: float = Field(
        ..., strict=True, gt=0, ge=constants.CONTRIBUTION_AMOUNT_MIN, le=constants.CONTRIBUTION_AMOUNT_MAX
    )
    message: Optional[str] = Field(None, max_length=constants.CONTRIBUTION_MESSAGE_MAX_LENGTH)

    @field_validator("donor_email", "message", mode="before")
    @classmethod
    def blank_optional_fields(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @field_validator("donor_email")
    @classmethod
    def validate_donor_email(cls, value: Optional[str]) -> Optional[str]:
        return _check_email(value)


# ============================================================================
# RÉSULTAT
# ============================================================================

@dataclass
class ValidationResult(Generic[M]):
    success: bool
    data: Optional[M] = None
    errors: Dict[str, str] = field(default_factory=dict)


def format_errors(exc: ValidationError) -> Dict[str, str]:
    """Convertit une ValidationError Pydantic en {chemin: message}"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "body"
        errors.setdefault(path, error["msg"])
    return errors


def validate_data(schema: Type[M], data: Any) -> ValidationResult[M]:
    """Valide `data` contre `schema` sans lever d'exception pour une entrée invalide"""
    try:
        return ValidationResult(success=True, data=schema.model_validate(data))
    except ValidationError as exc:
        return ValidationResult(success=False, errors=format_errors(exc))


def validate_project_create(data: Any) -> ValidationResult[ProjectCreateInput]:
    return validate_data(ProjectCreateInput, data)


def validate_project_update(data: Any) -> ValidationResult[ProjectUpdateInput]:
    return validate_data(ProjectUpdateInput, data)


def validate_contribution_create(data: Any) -> ValidationResult[ContributionCreateInput]:
    return validate_data(ContributionCreateInput, data)


def validate_image_file(content_type: Optional[str], size: int, allowed_types, max_size: int) -> Optional[str]:
    """Retourne un message d'erreur si l'image est refusée, None sinon"""
    if content_type not in allowed_types:
        return "Unsupported format. Use JPG, PNG or WebP."
    if size > max_size:
        return f"File is too large. Maximum {max_size // (1024 * 1024)}MB."
    if size == 0:
        return "File is empty."
    return None
