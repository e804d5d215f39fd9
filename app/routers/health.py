# Purpose:
# Defines the /api/health endpoint for the Meeting Insights API.
# - Reports which transcript backend is active and which upstreams are configured.
# - Useful for monitoring and deployment probes.
# app/routers/health.py
from fastapi import APIRouter, Depends

from app.factory import use_google_drive
from app.runtime import load_runtime_config
from app.settings import Settings, get_settings

router = APIRouter(tags=["health"])


def describe_backends(settings: Settings) -> dict:
    drive = use_google_drive(settings)
    return {
        "transcripts": "gdrive" if drive else "local",
        "transcripts_root": settings.gdrive_folder_id if drive else settings.transcripts_folder,
        "supabase": bool(settings.supabase_url and settings.supabase_key),
        "gemini": bool(settings.gemini_api_key),
    }


@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    cfg = load_runtime_config(settings.runtime_config)
    return {
        "status": "ok",
        "llm": {"adapter": cfg.llm_adapter, "model": cfg.llm_model},
        **describe_backends(settings),
    }
