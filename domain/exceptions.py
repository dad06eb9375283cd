"""
Exceptions du domaine
"""


class RepositoryError(Exception):
    """Échec d'une opération sur la base de données (hors "aucune ligne trouvée")"""
