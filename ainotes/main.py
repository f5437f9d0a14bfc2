"""
FastAPI main application entry point.

Architecture:
  Frontend → http://localhost:8000/api/items    → flat item list, note CRUD
             http://localhost:8000/api/folders  → folder CRUD, move
             http://localhost:8000/api/items/{id}/process → AI processing

The frontend re-fetches the flat item list after every mutation and
rebuilds the tree itself; while any item is ``processing`` it polls.
"""

import logging
import time
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ainotes import __version__
from ainotes.config import get_settings
from ainotes.database import close_db, connect_db, get_item_store
from ainotes.exceptions import PersistenceFailure
from ainotes.llm.factory import create_provider_from_settings
from ainotes.routers import folders, items, processing

# ============================================================
# Logging Configuration
# ============================================================
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Request lines are logged by RequestLoggingMiddleware
logging.getLogger("httpx").setLevel(logging.WARNING)


# ============================================================
# Application Lifespan (startup/shutdown)
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info("Starting up notes application...")

    _settings = get_settings()
    logger.info(f"CORS origins: {_settings.cors_origins_list}")
    logger.info(f"LLM provider: {_settings.effective_llm_provider} ({_settings.llm_model})")

    store = await connect_db(_settings.database_path)

    if _settings.seed_welcome_note:
        from ainotes.seed_notes import seed_welcome_note
        await seed_welcome_note(store)

    yield  # Application runs here

    logger.info("Shutting down notes application...")
    await close_db()


# ============================================================
# Create FastAPI Application
# ============================================================
app = FastAPI(
    title="AI Notes API",
    description="Hierarchical notes with folders and AI-generated child notes",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)


# ============================================================
# Middleware Stack (executes bottom-to-top)
# ============================================================
settings = get_settings()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} - {duration_ms:.0f}ms")
        return response


# 1. Request logging (outermost)
app.add_middleware(RequestLoggingMiddleware)

# 2. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# API Routes (all mounted under /api prefix)
# ============================================================
app.include_router(items.router, prefix="/api/items", tags=["Items"])
app.include_router(folders.router, prefix="/api/folders", tags=["Folders"])
app.include_router(processing.router, prefix="/api", tags=["Processing"])


# ============================================================
# Health Check Endpoints (under /api for consistency)
# ============================================================
@app.get("/api/health")
async def health_check() -> dict:
    """Liveness probe: confirms the process is running."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/health/ready")
async def readiness_check() -> dict:
    """Readiness probe: the item store is critical, the LLM provider is reported."""
    checks: dict = {}

    try:
        await get_item_store().ping()
        checks["database"] = "ok"
    except PersistenceFailure as e:
        checks["database"] = f"error: {e}"

    # LLM provider (optional but reported)
    provider = create_provider_from_settings(get_settings())
    if provider is None:
        checks["llm"] = "not configured"
    else:
        try:
            checks["llm"] = "ok" if await provider.test_connection() else "unavailable"
        except httpx.HTTPError as e:
            checks["llm"] = f"error: {e}"

    if checks["database"].startswith("error"):
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "checks": checks},
        )

    return {"status": "ready", "checks": checks}


# ============================================================
# Run with Uvicorn (for development)
# ============================================================
def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "ainotes.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
