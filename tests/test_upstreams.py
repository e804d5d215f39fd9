from typing import Any, Dict, List

import pytest

from app.adapters.datastore_supabase import MeetingQuery, SupabaseDataStore, normalize_row
from app.adapters.llm_gemini import GeminiAdapter
from app.errors import ConfigurationMissing, EmptyResult, UpstreamHttpError


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, url: str = "", text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.url = url
        self.text = text
        self.content = b"x" if payload is not None else b""

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


# ---------------- supabase ----------------
def test_meeting_query_params():
    q = MeetingQuery(date_from="01/02/2024", date_to="2024-03-01", type="Report", countries="Spain, Italy", topic="budget", limit=5)
    params = q.to_params()
    assert ("select", "*") in params
    assert ("date", "gte.2024-01-02") in params
    assert ("date", "lte.2024-03-01") in params
    assert ("type", "eq.Report") in params
    assert ("or", "(countries.ilike.*Spain*,countries.ilike.*Italy*)") in params
    assert ("or", "(headline.ilike.*budget*,summary.ilike.*budget*)") in params
    assert params[-2:] == [("order", "date.desc"), ("limit", "5")]


def test_meeting_query_defaults_skip_type_all():
    q = MeetingQuery()
    assert [k for k, _ in q.to_params()] == ["select", "order", "limit"]
    assert q.describe() == "limit=100"
    assert "where true" in q.sql_approx()


def test_normalize_row_aliases():
    row = normalize_row({"id": 1, "title": "T", "created_at": "2024-02-03T10:00:00Z", "messageId": "m", "transcriptPath": "/p", "link": "u"})
    assert row["title"] == "T"
    assert row["date_iso"] == "2024-02-03"
    assert row["message_id"] == "m"
    assert row["file_path"] == "/p"
    assert row["source_url"] == "u"
    assert normalize_row({})["title"] == "(untitled)"


def test_fetch_meetings(monkeypatch):
    calls: List[Dict[str, Any]] = []

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append({"url": url, "params": params, "headers": headers})
        return FakeResponse(200, [{"id": 7, "headline": "Call", "date": "2024-01-05", "summary": "s"}], url=url + "?select=*")

    monkeypatch.setattr("app.adapters.datastore_supabase.requests.get", fake_get)
    store = SupabaseDataStore("https://proj.supabase.co/", "key")
    out = store.fetch_meetings(MeetingQuery(topic="x"))
    assert calls[0]["url"] == "https://proj.supabase.co/rest/v1/meetings"
    assert calls[0]["headers"]["Authorization"] == "Bearer key"
    assert calls[0]["headers"]["apikey"] == "key"
    assert out["rows"][0]["title"] == "Call"
    assert out["rest_url"].startswith("https://proj.supabase.co/rest/v1/meetings")
    assert out["filters"] == "topic=x · limit=100"


def test_fetch_meetings_errors(monkeypatch):
    with pytest.raises(ConfigurationMissing, match="Supabase credentials not configured"):
        SupabaseDataStore(None, None).fetch_meetings(MeetingQuery())

    monkeypatch.setattr(
        "app.adapters.datastore_supabase.requests.get",
        lambda *a, **k: FakeResponse(500, text="x" * 1000),
    )
    with pytest.raises(UpstreamHttpError) as err:
        SupabaseDataStore("https://p", "k").fetch_meetings(MeetingQuery())
    assert err.value.status == 500
    assert str(err.value).startswith("Supabase HTTP 500: ")
    assert len(err.value.body) == 300


def test_insert_meeting(monkeypatch):
    sent = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        sent.update(json=json, headers=headers)
        return FakeResponse(201, [dict(json, id=9)])

    monkeypatch.setattr("app.adapters.datastore_supabase.requests.post", fake_post)
    out = SupabaseDataStore("https://p", "k").insert_meeting({"type": "Note"})
    assert sent["headers"]["Prefer"] == "return=representation"
    assert out == {"table": "meetings", "inserted": 1, "row": {"type": "Note", "id": 9}}


# ---------------- gemini ----------------
def test_gemini_sends_history_and_returns_text(monkeypatch):
    captured = {}

    def fake_post(url, params=None, json=None, timeout=None):
        captured.update(url=url, params=params, json=json)
        return FakeResponse(200, {
            "candidates": [{"content": {"parts": [{"text": "  hello  "}]}}],
            "usageMetadata": {"totalTokenCount": 12},
        })

    monkeypatch.setattr("app.adapters.llm_gemini.requests.post", fake_post)
    llm = GeminiAdapter("gemini-2.0-flash", api_key="k")
    text, usage = llm.chat("new q", [{"role": "user", "text": "q1"}, {"role": "model", "text": "a1"}], 0.2)

    assert text == "hello"
    assert usage == {"totalTokenCount": 12}
    assert captured["url"].endswith("/models/gemini-2.0-flash:generateContent")
    assert captured["params"] == {"key": "k"}
    contents = captured["json"]["contents"]
    assert [c["role"] for c in contents] == ["user", "model", "user"]
    assert contents[-1]["parts"][0]["text"] == "new q"
    assert captured["json"]["generationConfig"] == {"temperature": 0.2}


def test_gemini_failures(monkeypatch):
    with pytest.raises(ConfigurationMissing, match="GEMINI_API_KEY"):
        GeminiAdapter("m").chat("q", [], 0.2)

    monkeypatch.setattr(
        "app.adapters.llm_gemini.requests.post",
        lambda *a, **k: FakeResponse(400, {"error": {"message": "bad"}}),
    )
    with pytest.raises(UpstreamHttpError, match="Gemini HTTP 400"):
        GeminiAdapter("m", api_key="k").chat("q", [], 0.2)

    monkeypatch.setattr(
        "app.adapters.llm_gemini.requests.post",
        lambda *a, **k: FakeResponse(200, {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}}),
    )
    with pytest.raises(EmptyResult, match="SAFETY"):
        GeminiAdapter("m", api_key="k").chat("q", [], 0.2)
