"""
Adapter for the `meetings` table behind Supabase's PostgREST API.
Implements DataStorePort with plain `requests` calls (bearer-token auth, no client SDK).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from app.errors import ConfigurationMissing, UpstreamHttpError
from app.ports import DataStorePort
from app.services.dates import normalize_date_param

TABLE = "meetings"


def split_list(value: Optional[str]) -> List[str]:
    return [s.strip() for s in (value or "").split(",") if s.strip()]


@dataclass(frozen=True)
class MeetingQuery:
    """Named filters for one meetings lookup; renders PostgREST params and a debug SQL string."""

    date_from: str = ""
    date_to: str = ""
    type: str = "all"
    countries: str = ""
    topic: str = ""
    limit: int = 100

    @property
    def type_filter(self) -> Optional[str]:
        t = (self.type or "").strip()
        return t if t and t.lower() != "all" else None

    def to_params(self) -> List[Tuple[str, str]]:
        # list of pairs: PostgREST needs two separate `or` params when both filters apply
        params: List[Tuple[str, str]] = [("select", "*")]
        if self.date_from:
            params.append(("date", f"gte.{normalize_date_param(self.date_from)}"))
        if self.date_to:
            params.append(("date", f"lte.{normalize_date_param(self.date_to)}"))
        if self.type_filter:
            params.append(("type", f"eq.{self.type_filter}"))
        countries = split_list(self.countries)
        if countries:
            params.append(("or", "(" + ",".join(f"countries.ilike.*{c}*" for c in countries) + ")"))
        if self.topic:
            t = self.topic.strip()
            params.append(("or", f"(headline.ilike.*{t}*,summary.ilike.*{t}*)"))
        params.append(("order", "date.desc"))
        params.append(("limit", str(self.limit)))
        return params

    def describe(self) -> str:
        parts = [
            self.date_from and f"from {self.date_from}",
            self.date_to and f"to {self.date_to}",
            self.type_filter and f"type={self.type_filter}",
            self.countries and f"countries={self.countries}",
            self.topic and f"topic={self.topic}",
            f"limit={self.limit}",
        ]
        return " · ".join(p for p in parts if p)

    def sql_approx(self) -> str:
        where = [f"date >= '{self.date_from}'" if self.date_from else "true"]
        if self.date_to:
            where.append(f"date <= '{self.date_to}'")
        if self.type_filter:
            where.append(f"type = '{self.type_filter}'")
        countries = split_list(self.countries)
        if countries:
            where.append("(" + " or ".join(f"countries ilike '%{c}%'" for c in countries) + ")")
        if self.topic:
            where.append(f"(headline ilike '%{self.topic}%' or summary ilike '%{self.topic}%')")
        return (
            f"select * from public.{TABLE}\n"
            f"where {' and '.join(where)}\n"
            f"order by date desc\n"
            f"limit {self.limit};"
        )


def _first(rec: Dict[str, Any], *keys: str, default: str = "") -> Any:
    for k in keys:
        v = rec.get(k)
        if v:
            return v
    return default


def normalize_row(rec: Dict[str, Any]) -> Dict[str, Any]:
    created = rec.get("created_at")
    return {
        "id": rec.get("id"),
        "title": _first(rec, "headline", "title", default="(untitled)"),
        "date_iso": rec.get("date") or (str(created)[:10] if created else ""),
        "summary_text": rec.get("summary") or "",
        "countries": rec.get("countries") or "",
        "type": rec.get("type") or "",
        "message_id": _first(rec, "message_id", "messageId", "outlook_message_id", "outlookMessageId"),
        "file_path": _first(
            rec, "file_path", "filePath", "transcript_path", "transcriptPath", "transcript_file", "transcriptFile"
        ),
        "source_url": _first(rec, "source_url", "sourceUrl", "url", "link"),
    }


class SupabaseDataStore(DataStorePort):
    def __init__(self, url: Optional[str], key: Optional[str], timeout: Optional[float] = None):
        self.url = (url or "").rstrip("/")
        self.key = key or ""
        self.timeout = timeout

    def _require_config(self) -> None:
        if not self.url or not self.key:
            raise ConfigurationMissing("Supabase credentials not configured")

    @property
    def table_url(self) -> str:
        return f"{self.url}/rest/v1/{TABLE}"

    def _headers(self, **extra: str) -> Dict[str, str]:
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Accept": "application/json",
        }
        headers.update(extra)
        return headers

    def fetch_meetings(self, query: MeetingQuery) -> Dict[str, Any]:
        self._require_config()
        r = requests.get(
            self.table_url, params=query.to_params(), headers=self._headers(), timeout=self.timeout
        )
        if r.status_code >= 400:
            raise UpstreamHttpError("Supabase", r.status_code, r.text)
        rows = [normalize_row(rec) for rec in (r.json() or [])]
        return {
            "rows": rows,
            "rest_url": r.url,
            "sql_approx": query.sql_approx(),
            "filters": query.describe(),
        }

    def insert_meeting(self, record: Dict[str, Any]) -> Dict[str, Any]:
        self._require_config()
        r = requests.post(
            self.table_url,
            json=record,
            headers=self._headers(**{"Content-Type": "application/json", "Prefer": "return=representation"}),
            timeout=self.timeout,
        )
        if r.status_code >= 400:
            raise UpstreamHttpError("Supabase insert", r.status_code, r.text)
        data = r.json() if r.content else []
        if isinstance(data, list):
            return {"table": TABLE, "inserted": len(data), "row": data[0] if data else None}
        return {"table": TABLE, "inserted": 1, "row": data}
