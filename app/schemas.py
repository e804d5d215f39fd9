# app/schemas.py
# Purpose: Pydantic models for /api payloads so the JSON contract stays stable.

from pydantic import BaseModel, ConfigDict, Field


class TranscriptFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    mime_type: str = Field("text/plain", alias="mimeType")
    modified: str
    link: str = ""
    preview: str = ""


class MeetingSource(BaseModel):
    title: str = ""
    date: str = ""
    type: str = ""
    countries: str = ""
    message_id: str = ""
    file_path: str = ""
    source_url: str = ""
