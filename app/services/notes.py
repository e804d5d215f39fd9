"""
app/services/notes.py

Builds the `meetings` row written by the addnote action.
"""

from typing import Any, Dict, Mapping

from app.services.dates import today

NOTE_TYPE = "Note"


def note_headline(params: Mapping[str, Any]) -> str:
    """Explicit headline, else `Note by <author>`, else `Note`."""
    headline = str(params.get("headline") or params.get("note_headline") or "").strip()
    if headline:
        return headline
    author = str(params.get("author") or "").strip()
    return f"Note by {author}" if author else NOTE_TYPE


def build_note_record(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "type": NOTE_TYPE,
        "date": params.get("date") or today(),
        "countries": params.get("countries") or "",
        "headline": note_headline(params),
        "summary": params.get("note") or "",
    }
