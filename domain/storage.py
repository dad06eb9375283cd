"""
Interface ImageStorage - Stockage des images de projets
"""

from abc import ABC, abstractmethod


class ImageStorage(ABC):
    """Interface pour le stockage objet des images"""

    @abstractmethod
    def save(self, filename: str, content: bytes, content_type: str) -> str:
        """Stocke le fichier et retourne son URL publique"""
        pass

    @abstractmethod
    def delete(self, public_url: str) -> bool:
        """Supprime une image à partir de son URL publique"""
        pass
