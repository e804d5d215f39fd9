# app/adapters/llm_gemini.py
import json
from typing import Any, Dict, Optional, Sequence, Tuple

import requests

from app.errors import ConfigurationMissing, EmptyResult, UpstreamHttpError
from app.ports import LLMPort

GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GeminiAdapter(LLMPort):
    def __init__(self, model: str, api_key: Optional[str] = None, timeout: Optional[float] = None, base_url: str = GEMINI_BASE):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    def _raise(self, r):
        # Gemini errors are JSON; fall back to plain text
        try:
            body = json.dumps(r.json())
        except ValueError:
            body = r.text
        raise UpstreamHttpError("Gemini", r.status_code, body)

    def chat(self, prompt: str, history: Sequence[Dict[str, str]], temperature: float) -> Tuple[str, Dict[str, Any]]:
        if not self.api_key:
            raise ConfigurationMissing("Missing GEMINI_API_KEY in environment variables.")

        contents = [{"role": m["role"], "parts": [{"text": m["text"]}]} for m in history]
        contents.append({"role": "user", "parts": [{"text": prompt}]})
        body = {"contents": contents, "generationConfig": {"temperature": temperature}}

        url = f"{self.base_url}/models/{self.model}:generateContent"
        r = requests.post(url, params={"key": self.api_key}, json=body, timeout=self.timeout)
        if r.status_code >= 400:
            self._raise(r)

        data = r.json()
        candidates = data.get("candidates") or [{}]
        parts = (candidates[0].get("content") or {}).get("parts") or [{}]
        text = (parts[0].get("text") or "").strip()
        if not text:
            meta = data.get("promptFeedback") or data.get("safetyRatings") or data
            raise EmptyResult("Gemini API error: " + json.dumps(meta))
        return text, data.get("usageMetadata") or {}
