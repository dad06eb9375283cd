"""
crowdfunding-api/logging_config.py
Logging : une seule description (dictConfig) partagée par l'API et Uvicorn
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Bibliothèques trop bavardes en dessous de WARNING
QUIET_LOGGERS = ("sqlalchemy.engine", "watchfiles", "multipart")


class ColoredFormatter(logging.Formatter):
    """Colore le niveau de log (terminal uniquement)"""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if not color:
            return super().format(record)
        # Copie : le handler fichier doit recevoir le niveau sans séquences ANSI
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def build_log_config(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    colored: bool = False
) -> Dict[str, Any]:
    """Construit la configuration dictConfig (console, fichier optionnel)"""
    level = log_level.upper()
    formatters: Dict[str, Any] = {
        "plain": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT},
        "console": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT},
    }
    if colored:
        # Fabrique personnalisée : les clés restantes deviennent des arguments nommés
        formatters["console"] = {"()": ColoredFormatter, "fmt": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT}

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "filename": log_file,
            "encoding": "utf-8",
        }

    handler_names = list(handlers)
    loggers: Dict[str, Any] = {
        name: {"handlers": handler_names, "level": level, "propagate": False}
        for name in UVICORN_LOGGERS
    }
    loggers.update({name: {"level": "WARNING"} for name in QUIET_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "root": {"handlers": handler_names, "level": level},
        "loggers": loggers,
    }


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None, colored: bool = False) -> logging.Logger:
    """Applique la configuration et retourne le logger de l'application"""
    logging.config.dictConfig(build_log_config(log_level, log_file, colored))
    logger = logging.getLogger("crowdfunding")
    logger.info(f"✅ Logging configured (level={log_level.upper()}, colored={colored}, file={log_file or '-'})")
    return logger


def get_uvicorn_log_config(log_level: str = "INFO", colored: bool = False) -> Dict[str, Any]:
    """Même configuration, à passer à uvicorn.run(log_config=...)"""
    return build_log_config(log_level, colored=colored)
