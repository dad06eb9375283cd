"""
ImageService - Upload des images de projets
"""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional

from domain.storage import ImageStorage
from application.results import ErrorCode, ServiceResult
from application.validation import validate_image_file

logger = logging.getLogger(__name__)


class ImageService:
    """Service pour l'upload des images de projets"""

    def __init__(self, storage: ImageStorage, allowed_types: Iterable[str], max_size_bytes: int):
        self.storage = storage
        self.allowed_types = list(allowed_types)
        self.max_size_bytes = max_size_bytes

    @staticmethod
    def build_filename(original_name: Optional[str], project_id: Optional[str] = None) -> str:
        """Nom unique : <projet>-<timestamp>.<ext> ou <timestamp>-<aléa>.<ext>"""
        extension = Path(original_name or "").suffix.lstrip(".").lower() or "bin"
        timestamp = int(datetime.utcnow().timestamp() * 1000)
        if project_id:
            return f"{project_id}-{timestamp}.{extension}"
        return f"{timestamp}-{uuid.uuid4().hex[:8]}.{extension}"

    def upload_project_image(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
        project_id: Optional[str] = None
    ) -> ServiceResult[Dict[str, str]]:
        """Valide puis stocke une image, retourne son URL publique"""
        error = validate_image_file(
            content_type, len(content), self.allowed_types, self.max_size_bytes
        )
        if error:
            return ServiceResult.fail(error, code=ErrorCode.INVALID_IMAGE)

        stored_name = self.build_filename(filename, project_id)
        try:
            url = self.storage.save(stored_name, content, content_type)
        except Exception as e:
            return ServiceResult.from_exception(e, "uploading image")

        logger.info(f"🖼️ Image stored: {stored_name} ({len(content)} bytes)")
        return ServiceResult.ok({"url": url})
