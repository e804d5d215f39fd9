"""
Transcript discovery over a DocumentSourcePort: date window, then keyword match on
the filename, then (within a per-request budget) on the file content.

Scanning stops as soon as `limit` matches are collected, so with more candidates
than the limit the result is the first matches in traversal order, re-sorted by
recency. It is not a global top-N.

The date window always uses the effective timestamp (filename, then backend mtime);
results report and sort on the backend-reported time where there is one (Drive).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional

from app.errors import TranscriptReadError
from app.ports import DocumentSourcePort, SourceEntry
from app.schemas import TranscriptFile
from app.services.dates import parse_date_input, parse_name_timestamp, to_iso, utcnow
from app.services.formatting import make_preview

logger = logging.getLogger(__name__)

DEFAULTS = dict(limit=10, max_limit=50, max_content_checks=200, preview_chars=500)

_KW_SPLIT = re.compile(r"[,\s]+")


@dataclass
class SearchQuery:
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    keywords: Optional[str] = None
    limit: Any = None


def parse_keywords(raw: Optional[str | Iterable[str]]) -> List[str]:
    """Split on commas/whitespace, lower-case, drop empties."""
    if not raw:
        return []
    if not isinstance(raw, str):
        raw = ",".join(str(x) for x in raw)
    return [w.lower() for w in _KW_SPLIT.split(raw) if w.strip()]


def clamp_limit(limit: Any, default: int = DEFAULTS["limit"], ceiling: int = DEFAULTS["max_limit"]) -> int:
    try:
        n = int(limit)
    except (TypeError, ValueError):
        return default
    if n <= 0:
        return default
    return min(n, ceiling)


def keyword_hit(haystack: Optional[str], keywords: List[str]) -> bool:
    if not keywords:
        return True
    h = (haystack or "").lower()
    return any(w in h for w in keywords)


def effective_timestamp(entry: SourceEntry, now: Optional[datetime] = None) -> datetime:
    """Filename timestamp, else backend mtime, else now."""
    return parse_name_timestamp(entry.name) or entry.modified or now or utcnow()


def reported_timestamp(entry: SourceEntry, stamp: datetime) -> str:
    """`modified` shown for a result: what the backend reported, else the effective stamp."""
    return entry.reported_modified or to_iso(stamp)


def find_transcripts(
    source: DocumentSourcePort,
    query: SearchQuery,
    *,
    default_limit: int = DEFAULTS["limit"],
    max_limit: int = DEFAULTS["max_limit"],
    max_content_checks: int = DEFAULTS["max_content_checks"],
    preview_chars: int = DEFAULTS["preview_chars"],
) -> List[TranscriptFile]:
    limit = clamp_limit(query.limit, default_limit, max_limit)
    lower = parse_date_input(query.date_from)
    upper = parse_date_input(query.date_to, end_exclusive=True)
    keywords = parse_keywords(query.keywords)
    now = utcnow()

    results: List[TranscriptFile] = []
    checks = 0
    entries = source.list_all()

    try:
        for entry in entries:
            if len(results) >= limit:
                break

            stamp = effective_timestamp(entry, now)
            if lower is not None and stamp < lower:
                continue
            if upper is not None and stamp >= upper:
                continue

            hit = keyword_hit(entry.name, keywords)
            preview = ""

            if not hit and checks < max_content_checks:
                try:
                    body = source.read(entry.id)
                except TranscriptReadError as exc:
                    logger.debug("skipping unreadable transcript %s: %s", entry.id, exc)
                    continue
                checks += 1
                hit = keyword_hit(body, keywords)
                if hit:
                    preview = make_preview(body, preview_chars)

            if hit:
                results.append(
                    TranscriptFile(
                        id=entry.id,
                        name=entry.name,
                        mime_type=entry.mime_type or "text/plain",
                        modified=reported_timestamp(entry, stamp),
                        link=entry.link,
                        preview=preview,
                    )
                )
    finally:
        close = getattr(entries, "close", None)
        if close is not None:
            close()

    logger.info(
        "findtranscripts source=%s keywords=%s matched=%d content_checks=%d",
        source.kind, keywords, len(results), checks,
    )
    results.sort(key=lambda r: r.modified or "", reverse=True)
    return results[:limit]
