# main.py
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from careerlink.config import build_sqlalchemy_db_url, settings
from careerlink.database import Base, engine
from careerlink import models  # noqa: F401 - registers ORM tables on Base.metadata
from careerlink.api.routes.health import router as health_router
from careerlink.routers import auth, users
from careerlink.routers.companies import router as companies_router
from careerlink.routers.mentorship import router as mentorship_router
from careerlink.routers.search import router as search_router
from careerlink.routers.skill_match import router as skill_match_router
from careerlink.utils.logging_setup import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health_router)

    application.include_router(auth.router, prefix="/auth", tags=["auth"])
    application.include_router(users.router, prefix="/users", tags=["users"])
    application.include_router(skill_match_router, prefix=settings.api_prefix)
    application.include_router(mentorship_router, prefix=settings.api_prefix)
    application.include_router(search_router, prefix=settings.api_prefix)
    application.include_router(companies_router, prefix=settings.api_prefix)

    # Shared MySQL/PostgreSQL schemas are managed outside the app; sqlite is created on the fly.
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
