"""
LocalImageStorage - Stockage des images sur le système de fichiers local
(servies par l'API sous /uploads)
"""

import logging
from pathlib import Path
from typing import Optional

from domain.storage import ImageStorage

logger = logging.getLogger(__name__)


class LocalImageStorage(ImageStorage):
    """Écrit les images dans un répertoire exposé en statique"""

    def __init__(self, upload_dir: Path, public_base_url: str, url_prefix: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.url_prefix = url_prefix
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @property
    def _public_root(self) -> str:
        return f"{self.public_base_url}{self.url_prefix}/"

    def _public_url(self, filename: str) -> str:
        return f"{self._public_root}{filename}"

    def _owned_path(self, public_url: str) -> Optional[Path]:
        """Fichier local correspondant à une URL émise par ce stockage, sinon None"""
        if not public_url.startswith(self._public_root):
            return None
        filename = public_url[len(self._public_root):]
        if not filename or Path(filename).name != filename:
            return None
        return self.upload_dir / filename

    def save(self, filename: str, content: bytes, content_type: str) -> str:
        """Écrit le fichier (sans écraser un fichier existant)"""
        # Le nom ne doit pas sortir du répertoire d'upload
        safe_name = Path(filename).name
        file_path = self.upload_dir / safe_name

        try:
            with open(file_path, "xb") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Failed to save image {safe_name}: {e}")
            raise

        return self._public_url(safe_name)

    def delete(self, public_url: str) -> bool:
        """Supprime une image stockée ici ; False pour une URL externe ou un fichier absent"""
        file_path = self._owned_path(public_url)
        if file_path is None:
            return False

        try:
            if file_path.exists():
                file_path.unlink()
                logger.info(f"🗑️ Image deleted: {file_path.name}")
                return True
        except OSError as e:
            logger.warning(f"Failed to delete image {file_path.name}: {e}")
        return False
