"""
Infrastructure Storage - Adaptateurs de stockage des images
"""

from infrastructure.storage.local_image_storage import LocalImageStorage

__all__ = ["LocalImageStorage"]
