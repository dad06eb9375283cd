"""
Enveloppe de résultat uniforme retournée par tous les services
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from domain.exceptions import RepositoryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Codes d'erreur stables, traduits en statuts HTTP par la couche API"""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    PROJECT_NOT_ACTIVE = "PROJECT_NOT_ACTIVE"
    INVALID_IMAGE = "INVALID_IMAGE"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ServiceError:
    message: str
    code: Optional[ErrorCode] = None
    details: Optional[Dict[str, str]] = None


@dataclass
class ServiceResult(Generic[T]):
    """{success, data, error}"""
    success: bool
    data: Optional[T] = None
    error: Optional[ServiceError] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        message: str,
        code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> "ServiceResult[T]":
        return cls(success=False, error=ServiceError(message=message, code=code, details=details))

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult[T]":
        return cls.fail(message, code=ErrorCode.NOT_FOUND)

    @classmethod
    def invalid(cls, errors: Dict[str, str]) -> "ServiceResult[T]":
        return cls.fail("Invalid data", code=ErrorCode.VALIDATION_ERROR, details=errors)

    @classmethod
    def from_exception(cls, exc: Exception, context: str) -> "ServiceResult[T]":
        """
        Normalise une exception en échec.
        Les erreurs de stockage gardent leur message, les autres restent génériques.
        """
        if isinstance(exc, RepositoryError):
            return cls.fail(str(exc), code=ErrorCode.DATABASE_ERROR)
        logger.error(f"Unexpected error while {context}: {exc}", exc_info=True)
        return cls.fail(f"Unexpected error while {context}", code=ErrorCode.INTERNAL_ERROR)
