"""
app/factory.py

Builds the Meeting Insights service from YAML runtime config plus environment settings.
- Swaps LLM providers by config (Gemini or OpenAI), no code edits.
- Picks the transcript backend (Google Drive or local folder) per request from the current settings.
- Conversation stores are created once at startup and passed in; everything else is rebuilt per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.adapters.datastore_supabase import SupabaseDataStore
from app.adapters.llm_gemini import GeminiAdapter
from app.adapters.llm_openai import OpenAIAdapter
from app.adapters.session_memory import InMemorySessionStore
from app.adapters.source_gdrive import GoogleDriveSource, ID_PREFIX, load_service_account_info
from app.adapters.source_local import LocalFolderSource
from app.ports import DocumentSourcePort, LLMPort
from app.runtime import RuntimeConfig, load_runtime_config
from app.services.conversations import ConversationStore
from app.services.qa import InsightsService
from app.settings import Settings


@dataclass
class ConversationStores:
    """The two independent conversation domains; lives for the whole process."""

    general: ConversationStore
    transcript: ConversationStore

    def clear_all(self) -> None:
        self.general.store.clear()
        self.transcript.store.clear()


def build_conversation_stores(cfg: RuntimeConfig) -> ConversationStores:
    return ConversationStores(
        general=ConversationStore(InMemorySessionStore(), max_turns=cfg.max_turns),
        transcript=ConversationStore(InMemorySessionStore(), max_turns=cfg.max_turns),
    )


def build_llm(settings: Settings, cfg: RuntimeConfig) -> LLMPort:
    if cfg.llm_adapter == "gemini":
        return GeminiAdapter(model=cfg.llm_model, api_key=settings.gemini_api_key, timeout=cfg.timeout)
    if cfg.llm_adapter == "openai":
        return OpenAIAdapter(model=cfg.llm_model, timeout=cfg.timeout)
    raise ValueError(f"Unknown llm.adapter: {cfg.llm_adapter}")


def build_datastore(settings: Settings, cfg: RuntimeConfig) -> SupabaseDataStore:
    return SupabaseDataStore(settings.supabase_url, settings.supabase_key, timeout=cfg.timeout)


def use_google_drive(settings: Settings) -> bool:
    return bool(settings.gdrive_folder_id and load_service_account_info(settings))


def build_drive_source(settings: Settings, cfg: RuntimeConfig) -> GoogleDriveSource:
    return GoogleDriveSource(
        settings.gdrive_folder_id,
        load_service_account_info(settings),
        max_depth=cfg.max_depth,
    )


def build_local_source(settings: Settings, cfg: RuntimeConfig) -> LocalFolderSource:
    return LocalFolderSource(settings.transcripts_folder, max_depth=cfg.max_depth)


def select_document_source(settings: Settings, cfg: RuntimeConfig) -> DocumentSourcePort:
    """Drive when a folder id and credentials are both present, otherwise the local folder."""
    if use_google_drive(settings):
        return build_drive_source(settings, cfg)
    return build_local_source(settings, cfg)


def source_for_id(entry_id: str, settings: Settings, cfg: RuntimeConfig) -> DocumentSourcePort:
    """The backend that owns a transcript id returned by findtranscripts."""
    if entry_id.startswith(ID_PREFIX):
        return build_drive_source(settings, cfg)
    return build_local_source(settings, cfg)


def build_service(
    settings: Settings,
    conversations: ConversationStores,
    cfg: Optional[RuntimeConfig] = None,
) -> InsightsService:
    cfg = cfg or load_runtime_config(settings.runtime_config)
    return InsightsService(
        datastore=build_datastore(settings, cfg),
        llm=build_llm(settings, cfg),
        conversations=conversations.general,
        transcript_conversations=conversations.transcript,
        source_factory=lambda: select_document_source(settings, cfg),
        source_for_id=lambda entry_id: source_for_id(entry_id, settings, cfg),
        cfg=cfg,
    )

