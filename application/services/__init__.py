"""
Services applicatifs
"""

from application.services.project_service import ProjectService
from application.services.contribution_service import ContributionService
from application.services.image_service import ImageService

__all__ = [
    "ProjectService",
    "ContributionService",
    "ImageService"
]
