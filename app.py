"""
crowdfunding-api/app.py
Point d'entrée : assemblage de l'application FastAPI
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.endpoints import projects_router, contributions_router, stats_router, uploads_router
from api.errors import register_exception_handlers
from config import Config
from infrastructure.database.init_db import init_db
from logging_config import setup_logging, get_uvicorn_log_config

SERVICE_NAME = "crowdfunding-api"
VERSION = "1.0.0"

config = Config()
logger = setup_logging(
    log_level=config.log_level,
    log_file=config.log_file_path if config.log_file_enabled else None,
    colored=config.log_colored
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Démarrage : création des tables manquantes"""
    # Ne jamais journaliser les identifiants de connexion
    logger.info(f"🚀 {SERVICE_NAME} {VERSION} starting (db: {config.database_url.split('@')[-1]})")
    init_db()
    yield
    logger.info(f"🛑 {SERVICE_NAME} stopped")


def create_app() -> FastAPI:
    application = FastAPI(
        title="Crowdfunding API",
        description="Projets de financement participatif, contributions et statistiques",
        version=VERSION,
        lifespan=lifespan
    )
    application.state.config = config

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
    register_exception_handlers(application)

    for router in (projects_router, contributions_router, stats_router, uploads_router):
        application.include_router(router, prefix="/api")

    # Images téléversées, servies telles quelles
    config.upload_dir.mkdir(parents=True, exist_ok=True)
    application.mount("/uploads", StaticFiles(directory=str(config.upload_dir)), name="uploads")

    @application.get("/", tags=["System"])
    def root():
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "status": "operational",
            "api": "/api",
            "docs": "/docs"
        }

    @application.get("/health", tags=["System"])
    def health_check():
        """Sonde de vivacité (ne touche pas la base)"""
        return {"status": "healthy", "service": SERVICE_NAME}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_config=get_uvicorn_log_config(config.log_level, colored=config.log_colored)
    )
