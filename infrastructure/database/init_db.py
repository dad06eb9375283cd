"""
Initialisation de la base de données
"""

import logging
from infrastructure.database.session import engine
from infrastructure.database.models import Base

logger = logging.getLogger(__name__)


def init_db(bind=None):
    """Crée les tables manquantes (projects, contributions)"""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("✅ Tables de base de données créées")
