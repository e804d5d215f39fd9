"""
app/settings.py

Environment configuration for the Meeting Insights API.
- Credentials and locations for Supabase, Gemini, Google Drive and the local transcripts folder.
- Uses pydantic-settings so values come from environment variables or a `.env` file.
- Read per request through `get_settings()` so credential changes take effect without a restart.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT = Path(__file__).resolve().parents[1]   # project root


class Settings(BaseSettings):
    """
    Settings holding upstream credentials and runtime file locations.
    Field names map case-insensitively to environment variables (SUPABASE_URL, GEMINI_API_KEY, ...).
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # ---------- Data store ----------
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # ---------- LLM ----------
    gemini_api_key: Optional[str] = None

    # ---------- Transcripts ----------
    gdrive_folder_id: Optional[str] = None
    google_service_account_key_file: Optional[str] = None
    google_service_account_key_json: Optional[str] = None
    google_service_account_email: Optional[str] = None
    google_private_key: Optional[str] = None
    transcripts_folder: str = "./transcripts"

    # ---------- Access ----------
    app_password: Optional[str] = None
    auth_realm: str = "Meeting Insights"

    # ---------- Runtime ----------
    log_level: str = "INFO"
    runtime_config: Path = Field(
        default=ROOT / "configs" / "runtime.yaml",
        validation_alias="INSIGHTS_RUNTIME",
    )


def get_settings() -> Settings:
    return Settings()
