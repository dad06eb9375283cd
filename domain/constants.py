"""
Règles métier partagées (bornes de validation)
"""

PROJECT_TITLE_MIN_LENGTH = 5
PROJECT_TITLE_MAX_LENGTH = 255
PROJECT_DESCRIPTION_MIN_LENGTH = 20
PROJECT_DESCRIPTION_MAX_LENGTH = 5000
PROJECT_GOAL_MIN = 1_000
PROJECT_GOAL_MAX = 10_000_000

CONTRIBUTION_AMOUNT_MIN = 100
CONTRIBUTION_AMOUNT_MAX = 1_000_000
DONOR_NAME_MIN_LENGTH = 2
DONOR_NAME_MAX_LENGTH = 255
CONTRIBUTION_MESSAGE_MAX_LENGTH = 1000

# Seuil à partir duquel un projet actif est considéré "presque financé"
ALMOST_FUNDED_THRESHOLD = 75
