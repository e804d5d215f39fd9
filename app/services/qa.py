"""
Action handlers behind /api: meeting Q&A, transcript discovery, transcript Q&A,
notes and reports. Each returns the JSON payload for a successful action and
raises an InsightsError subclass otherwise.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from app.adapters.datastore_supabase import MeetingQuery
from app.errors import BackendUnavailable, EmptyResult, InvalidRequest, TranscriptReadError
from app.ports import DataStorePort, DocumentSourcePort, LLMPort
from app.runtime import RuntimeConfig
from app.schemas import MeetingSource
from app.services.conversations import ConversationStore, filters_fingerprint
from app.services.notes import build_note_record
from app.services.prompting import (
    build_meeting_followup,
    build_meeting_prompt,
    build_transcript_followup,
    build_transcript_prompt,
    prepare_transcript,
)
from app.services.transcript_search import SearchQuery, find_transcripts

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"
DEFAULT_TRANSCRIPT_SESSION = "tr_default"
DEFAULT_MEETINGS_LIMIT = 100


def _param(params: Mapping[str, Any], *names: str, default: str = "") -> str:
    for name in names:
        value = params.get(name)
        if value not in (None, ""):
            return str(value)
    return default


def _int_param(params: Mapping[str, Any], name: str, default: int) -> int:
    try:
        return int(params.get(name) or default)
    except (TypeError, ValueError):
        return default


def _source_payload(row: Dict[str, Any]) -> Dict[str, str]:
    return MeetingSource(
        title=row.get("title") or "",
        date=row.get("date_iso") or "",
        type=row.get("type") or "",
        countries=row.get("countries") or "",
        message_id=str(row.get("message_id") or ""),
        file_path=row.get("file_path") or "",
        source_url=row.get("source_url") or "",
    ).model_dump()


class InsightsService:
    def __init__(
        self,
        datastore: DataStorePort,
        llm: LLMPort,
        conversations: ConversationStore,
        transcript_conversations: ConversationStore,
        source_factory: Callable[[], DocumentSourcePort],
        source_for_id: Callable[[str], DocumentSourcePort],
        cfg: RuntimeConfig,
    ):
        self.datastore = datastore
        self.llm = llm
        self.conversations = conversations
        self.transcript_conversations = transcript_conversations
        self.source_factory = source_factory
        self.source_for_id = source_for_id
        self.cfg = cfg

    # ---------------- meetings ----------------
    def ask(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        session_id = _param(params, "sessionId", default=DEFAULT_SESSION)
        question = _param(params, "question", "q")
        style = _param(params, "style", default="normal")
        query = MeetingQuery(
            date_from=_param(params, "from"),
            date_to=_param(params, "to"),
            type=_param(params, "type", default="all"),
            countries=_param(params, "countries"),
            topic=_param(params, "topic"),
            limit=_int_param(params, "limit", DEFAULT_MEETINGS_LIMIT),
        )

        fetched = self.datastore.fetch_meetings(query)
        rows = fetched["rows"]

        key = filters_fingerprint(query.date_from, query.date_to, query.type, query.countries, query.topic)
        state, is_new = self.conversations.begin_turn(session_id, key)

        if is_new:
            prompt = build_meeting_prompt(
                question,
                rows,
                style,
                profile=self.cfg.profile,
                preview_len=self.cfg.preview_chars,
                answer_len=self.cfg.answer_chars,
            )
        else:
            prompt = build_meeting_followup(question)

        answer, usage = self.llm.chat(prompt, list(state.history), self.cfg.temperature)
        state = self.conversations.append(session_id, prompt, answer)

        logger.info(
            "ask session=%s rows=%d new_conversation=%s turns=%d",
            session_id, len(rows), is_new, state.turns,
        )
        return {
            "ok": True,
            "filters": fetched["filters"],
            "answer": answer,
            "sources": [_source_payload(r) for r in rows],
            "conversationLength": state.turns,
            "isNewConversation": is_new,
            "debug": {
                "rest": fetched["rest_url"],
                "sql_approx": fetched["sql_approx"],
                "prompt": prompt,
                "usage": usage,
            },
        }

    def get_reports(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        query = MeetingQuery(
            date_from=_param(params, "from"),
            date_to=_param(params, "to"),
            type="Report",
            limit=self.cfg.reports_limit,
        )
        fetched = self.datastore.fetch_meetings(query)
        return {"ok": True, "reports": fetched["rows"]}

    def add_note(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        result = self.datastore.insert_meeting(build_note_record(params))
        return {"ok": True, "result": result}

    def clear_conversation(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        self.conversations.clear(_param(params, "sessionId", default=DEFAULT_SESSION))
        return {"ok": True, "message": "Conversation cleared"}

    # ---------------- transcripts ----------------
    def find_transcripts(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        source = self.source_factory()
        query = SearchQuery(
            date_from=_param(params, "from"),
            date_to=_param(params, "to"),
            keywords=_param(params, "keywords"),
            limit=params.get("limit"),
        )
        results = find_transcripts(
            source,
            query,
            default_limit=self.cfg.default_limit,
            max_limit=self.cfg.max_limit,
            max_content_checks=self.cfg.max_content_checks,
            preview_chars=self.cfg.search_preview_chars,
        )
        return {"ok": True, "results": [r.model_dump(by_alias=True) for r in results]}

    def _read_transcript(self, entry_id: str) -> str:
        try:
            return self.source_for_id(entry_id).read(entry_id) or ""
        except (TranscriptReadError, BackendUnavailable) as exc:
            raise TranscriptReadError(f"Failed to read transcript: {exc}") from exc

    def ask_transcript(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        entry_id = _param(params, "id").strip()
        question = _param(params, "question").strip()
        session_id = _param(params, "sessionId", default=DEFAULT_TRANSCRIPT_SESSION).strip()
        if not entry_id:
            raise InvalidRequest("Missing transcript id")
        if not question:
            raise InvalidRequest("Missing question")

        raw = self._read_transcript(entry_id)
        if not raw.strip():
            raise EmptyResult("Transcript is empty")

        state, is_new = self.transcript_conversations.begin_turn(session_id, entry_id)
        if is_new:
            text = prepare_transcript(raw, self.cfg.max_transcript_chars)
            prompt = build_transcript_prompt(question, text, profile=self.cfg.profile)
        else:
            prompt = build_transcript_followup(question)

        answer, _usage = self.llm.chat(prompt, list(state.history), self.cfg.temperature)
        state = self.transcript_conversations.append(session_id, prompt, answer)

        logger.info(
            "asktranscript session=%s id=%s new_conversation=%s turns=%d",
            session_id, entry_id, is_new, state.turns,
        )
        return {
            "ok": True,
            "answer": answer,
            "conversationLength": state.turns,
            "isNewConversation": is_new,
        }

    def clear_transcript_conversation(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        self.transcript_conversations.clear(_param(params, "sessionId", default=DEFAULT_TRANSCRIPT_SESSION))
        return {"ok": True, "message": "Transcript conversation cleared"}
