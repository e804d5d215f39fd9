"""
app/main.py

FastAPI application entrypoint.
- Creates the FastAPI app instance and the process-wide conversation stores (cleared on shutdown).
- Registers the routers (/api action endpoint, /api/health).
- Adds CORS and the optional shared-password gate.
- Provides a friendly "/" redirect to Swagger docs to avoid confusing 404s.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, JSONResponse

from app.auth import password_gate
from app.factory import build_conversation_stores
from app.routers import api, health
from app.routers.health import describe_backends
from app.runtime import RuntimeConfig, load_runtime_config
from app.settings import get_settings

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = load_runtime_config(settings.runtime_config)
    except FileNotFoundError as e:
        logger.warning("%s; using built-in defaults for conversation limits", e)
        cfg = RuntimeConfig()
    app.state.conversations = build_conversation_stores(cfg)

    info = describe_backends(settings)
    logger.info("Transcripts: %s (%s)", info["transcripts"], info["transcripts_root"])
    logger.info("Supabase: %s", settings.supabase_url or "Not configured")
    logger.info("Gemini API: %s", "Configured" if info["gemini"] else "Not configured")
    yield
    app.state.conversations.clear_all()


app = FastAPI(
    title="Meeting Insights API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS for the browser frontend; tighten by domain when deployed
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(password_gate)

# Root: be nice during dev instead of 404ing
@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")

# Quick ping that doesn't depend on your routers
@app.get("/api/ping", include_in_schema=False)
def ping():
    return JSONResponse({"status": "ok", "service": "meeting-insights", "version": "0.1.0"})

# Routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(api.router, tags=["api"])
