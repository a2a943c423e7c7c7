import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core import config, db
from core.exceptions import InvalidUsageError
from shared.responses import AppResponse
from users import repository as users_repository
from users import router as users_router

config.configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the MongoDB client once per process.
    await db.init_client()
    await users_repository.get_user_repository().ensure_indexes()
    if config.docs_enabled():
        logger.info("API docs are available at %s", config.DOCS_URL)
    try:
        yield
    finally:
        await db.close_client()


def _docs_kwargs() -> dict:
    if not config.docs_enabled():
        return {"docs_url": None, "redoc_url": None, "openapi_url": None}
    return {
        "docs_url": config.DOCS_URL,
        "redoc_url": config.REDOC_URL,
        "openapi_url": config.OPENAPI_URL,
    }


def _error_response(status_code: int, message: str, data: Any = None, headers: dict | None = None) -> JSONResponse:
    body = AppResponse[Any](status_code=status_code, message=message, data=data)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(422, "Validation failed.", data=jsonable_encoder(exc.errors()))


async def invalid_usage_handler(request: Request, exc: InvalidUsageError) -> JSONResponse:
    logger.error("invalid_usage path=%s", request.url.path, exc_info=exc)
    return _error_response(500, str(exc))


def health() -> dict:
    return {"status": "ok"}


def root() -> dict:
    return {"message": "users api"}


def create_app() -> FastAPI:
    """
    Build the app from the current environment (docs toggle, CORS origins).
    """
    app = FastAPI(
        title="Api document",
        description="Users REST API backed by MongoDB",
        version="1.0",
        lifespan=lifespan,
        **_docs_kwargs(),
    )

    origins = config.cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Every error body uses the same envelope as successful responses.
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidUsageError, invalid_usage_handler)

    app.include_router(users_router.router, tags=["users"])
    app.add_api_route("/health", health, methods=["GET"])
    app.add_api_route("/", root, methods=["GET"])
    return app


app = create_app()
