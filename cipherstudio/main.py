"""FastAPI server entry point"""

import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cipherstudio.api.routes import auth, health, nodes, projects
from cipherstudio.config import settings
from cipherstudio.exceptions import (
    AppError,
    ConsistencyError,
    InvalidNameError,
    NameConflictError,
    NotFoundError,
    SyncError,
    UnauthenticatedError,
    WrongKindError,
)

logger = logging.getLogger(__name__)

# First match wins, so subclasses come before their bases
ERROR_STATUS: list[tuple[type[AppError], int]] = [
    (NotFoundError, 404),
    (WrongKindError, 400),
    (InvalidNameError, 400),
    (NameConflictError, 409),
    (UnauthenticatedError, 401),
    (SyncError, 502),
    (ConsistencyError, 500),
]


def setup_logging(log_dir: Optional[Path] = None, level: Optional[str] = None) -> Path:
    """Configure logging with file output"""
    logs_dir = Path(log_dir or settings.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "cipherstudio.log"

    handlers = [
        logging.StreamHandler(),
        RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ]

    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Supabase client logs every request through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return log_file


def status_for(exc: AppError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown"""
    logger.info("Starting CipherStudio server...")
    yield
    logger.info("CipherStudio server stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="CipherStudio API",
        description="Project file trees with Supabase persistence",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        status = status_for(exc)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({status}): {exc}")
        return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})

    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
    app.include_router(projects.router, prefix="/api/v1/projects", tags=["projects"])
    app.include_router(nodes.router, prefix="/api/v1/nodes", tags=["nodes"])
    return app


app = create_app()


def run():
    import uvicorn

    log_file = setup_logging()
    logger.info(f"Logs are written to: {log_file}")
    logger.info(f"Starting uvicorn on {settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info",
        access_log=True,
    )


if __name__ == "__main__":
    run()
