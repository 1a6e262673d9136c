from contextlib import asynccontextmanager

import logging

import uvicorn

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config import settings
from shared.database import create_tables
from shared.dependencies import get_db
from shared.exceptions import CoachingError
from shared.exceptions_handler import (coaching_exception_handler, request_validation_exception_handler,
                                       unhandled_exception_handler)
from shared.logging_config import configure_logging

from members.routers import members_router
from teams.routers import teams_router, team_members_router
from feedback.routers import feedback_router

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan_manager(app: FastAPI):
    logger.info("[%s] Lifespan: starting up", settings.SERVICE_NAME)
    if settings.CREATE_TABLES_ON_STARTUP:
        create_tables()
        logger.info("[%s] Lifespan: database tables ensured", settings.SERVICE_NAME)

    if settings.AUDIT_ENABLED:
        logger.info("[%s] Lifespan: audit events go to %s", settings.SERVICE_NAME, settings.RABBITMQ_URL)

    yield

    logger.info("[%s] Lifespan: shutdown complete", settings.SERVICE_NAME)


app = FastAPI(title="Coaching Service", lifespan=lifespan_manager)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-Requested-With"],
    expose_headers=["Content-Length"],
)

app.include_router(members_router.router)

app.include_router(teams_router.router)

app.include_router(team_members_router.router)

app.include_router(feedback_router.router)

app.add_exception_handler(CoachingError, coaching_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database_status = "reachable"
    except SQLAlchemyError as e:
        logger.error("Health check could not reach the database: %s", e)
        database_status = "unreachable"

    return {
        "service": settings.SERVICE_NAME,
        "status": "healthy_api",
        "database": database_status,
        "audit_enabled": settings.AUDIT_ENABLED
    }

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, proxy_headers=True)
