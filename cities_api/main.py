import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cities_api.api.v1.routes.cities import router as cities_router
from cities_api.config import settings
from cities_api.core.dependencies import get_city_repository, get_mongo_client
from cities_api.core.exceptions import CityServiceError, StorageError
from cities_api.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    logger.info("Starting up application...")

    # Ensure store indexes
    try:
        await app.dependency_overrides.get(get_city_repository, get_city_repository)().ensure_indexes()
    except CityServiceError as e:
        logger.error(f"Index initialization failed: {e.message}")
        # Continue anyway - requests will surface storage errors individually

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if get_mongo_client.cache_info().currsize:
        await get_mongo_client().close()
        get_mongo_client.cache_clear()


async def service_error_handler(request: Request, exc: CityServiceError) -> JSONResponse:
    """Render any expected service error as ``{"error": message}``."""
    if isinstance(exc, StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/query validation failures are client errors with a readable message."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:]) or "body"
        problems.append(f"{location}: {error.get('msg')}")
    message = "City validation failed: " + "; ".join(problems)
    logger.info(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def create_app() -> FastAPI:
    """Create FastAPI application, register error handlers and include routers."""
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="City Service",
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CityServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(cities_router, prefix="/api")

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("cities_api.main:app", host=settings.HOST, port=settings.PORT)
