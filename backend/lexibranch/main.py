import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from lexibranch.api.dependencies import build_services
from lexibranch.api.routes import router
from lexibranch.config import settings
from lexibranch.database import engine
from lexibranch.errors import (
    FieldValidationError,
    ForbiddenError,
    LexibranchError,
    NotFoundError,
    ValidationError,
)
from lexibranch.infrastructure.database.schema import metadata

logger = logging.getLogger(__name__)


def _error_status(exc: LexibranchError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ForbiddenError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, FieldValidationError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _handle_lexibranch_error(request: Request, exc: LexibranchError) -> JSONResponse:
    code = _error_status(exc)
    if code >= 500:
        logger.exception("Unhandled branching error path=%s", request.url.path, exc_info=exc)
    if isinstance(exc, FieldValidationError):
        return JSONResponse(status_code=code, content={"detail": exc.to_dict()})
    return JSONResponse(status_code=code, content={"detail": exc.message})


def create_app(session_factory: Optional[sessionmaker] = None) -> FastAPI:
    app = FastAPI(title="Lexibranch API")
    app.state.services = build_services(session_factory)
    app.add_exception_handler(LexibranchError, _handle_lexibranch_error)

    @app.on_event("startup")
    def on_startup() -> None:
        logging.basicConfig(level=settings.log_level, format=settings.log_format)
        if settings.jwt_secret_key == "change-me":
            raise RuntimeError(
                "LEXIBRANCH_JWT_SECRET_KEY must be set to a non-default secure value."
            )
        if settings.bootstrap_schema:
            bind = engine
            if session_factory is not None:
                with session_factory() as session:
                    bind = session.get_bind()
            metadata.create_all(bind=bind)
            logger.info("Database schema bootstrapped")

    cors_origins = list(settings.cors_origins or [])
    allow_all_origins = "*" in cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all_origins else cors_origins,
        allow_credentials=not allow_all_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(router)
    return app


app = create_app()
