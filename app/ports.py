"""
app/ports.py

Interfaces the services depend on. Adapters in app/adapters implement these so
providers can be swapped from configs/runtime.yaml without touching callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

TRANSCRIPT_EXTENSIONS = (".txt", ".vtt", ".srt")


def has_transcript_extension(name: str) -> bool:
    return (name or "").lower().endswith(TRANSCRIPT_EXTENSIONS)


@dataclass(frozen=True)
class SourceEntry:
    """One transcript candidate as reported by a document backend."""

    id: str
    name: str
    mime_type: str = "text/plain"
    modified: Optional[datetime] = None
    link: str = ""
    # modification time exactly as the backend reported it, shown in results when present
    reported_modified: Optional[str] = None


class DocumentSourcePort(ABC):
    """Uniform listing/reading over a folder tree of transcripts."""

    kind: str = "unknown"

    @abstractmethod
    def list_all(self, root: Optional[str] = None) -> Iterator[SourceEntry]:
        """Yield transcript entries under `root` (defaults to the configured root)."""

    @abstractmethod
    def read(self, entry_id: str) -> str:
        """Return the text content of an entry. Raises TranscriptReadError."""


class LLMPort(ABC):
    @abstractmethod
    def chat(
        self,
        prompt: str,
        history: Sequence[Dict[str, str]],
        temperature: float,
    ) -> Tuple[str, Dict[str, Any]]:
        """Send prior turns plus a new user turn; return (answer, usage)."""


class SessionStorePort(ABC):
    """Keyed storage for per-session conversation state."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def put(self, session_id: str, state: Any) -> None:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        """Drop every session (used at shutdown)."""


class DataStorePort(ABC):
    @abstractmethod
    def fetch_meetings(self, query: Any) -> Dict[str, Any]:
        """Return {"rows", "rest_url", "sql_approx", "filters"}."""

    @abstractmethod
    def insert_meeting(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row; return {"table", "inserted", "row"}."""


__all__: List[str] = [
    "TRANSCRIPT_EXTENSIONS",
    "has_transcript_extension",
    "SourceEntry",
    "DocumentSourcePort",
    "LLMPort",
    "SessionStorePort",
    "DataStorePort",
]
