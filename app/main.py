"""Eats Backend – FastAPI application serving the accounts GraphQL API."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings, setup_logging
from app.database import Base, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from app.models import User, Verification  # noqa: F401
from app.routers import accounts

settings = get_settings()
setup_logging()
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(accounts.router, prefix="/graphql")


@app.on_event("startup")
def startup():
    if not (settings.mailgun_api_key and settings.mailgun_domain) and not settings.sendgrid_api_key:
        logger.warning("[Email] Not configured - verification emails will be skipped; set MAILGUN_API_KEY and MAILGUN_DOMAIN in .env and restart")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.warning("Database startup failed (tables skipped). Check DATABASE_URL and network. Error: %s", e)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
