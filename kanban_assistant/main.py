"""Kanban Board Assistant API"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .errors import PipelineError
from .routes import boards, chat
from .services.completion import CompletionGateway
from .services.database import Database

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {settings.app_name}...")
    app.state.db.initialize()
    yield
    logger.info(f"Shutting down {settings.app_name}...")
    app.state.db.close()


def create_app(
    db: Optional[Database] = None,
    gateway: Optional[CompletionGateway] = None
) -> FastAPI:
    """Build the application around a database and a completion gateway"""
    app = FastAPI(
        title=settings.app_name,
        description="Kanban board API with an AI assistant",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.db = db or Database(Path(settings.database_path))
    app.state.gateway = gateway or CompletionGateway.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PipelineError)
    async def pipeline_exception_handler(request: Request, exc: PipelineError):
        if exc.status_code >= 500:
            logger.error(f"Chat pipeline failed: {exc.__class__.__name__}: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc) or exc.__class__.__name__}
        )

    app.include_router(boards.router, prefix="/boards", tags=["boards"])
    app.include_router(chat.router, prefix="/ai", tags=["ai"])

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
