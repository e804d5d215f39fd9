from typing import Any, Dict, Optional, Sequence, Tuple

from openai import OpenAI, OpenAIError

from app.errors import ConfigurationMissing, EmptyResult
from app.ports import LLMPort

ROLE_MAP = {"user": "user", "model": "assistant"}


class OpenAIAdapter(LLMPort):
    def __init__(self, model: str, timeout: Optional[float] = None):
        self.model = model
        self.timeout = timeout
        self._client = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            try:
                self._client = OpenAI(timeout=self.timeout)
            except OpenAIError as exc:
                raise ConfigurationMissing(f"OpenAI not configured: {exc}") from exc
        return self._client

    def chat(self, prompt: str, history: Sequence[Dict[str, str]], temperature: float) -> Tuple[str, Dict[str, Any]]:
        messages = [{"role": ROLE_MAP.get(m["role"], "user"), "content": m["text"]} for m in history]
        messages.append({"role": "user", "content": prompt})
        resp = self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            messages=messages,
        )
        msg = (resp.choices[0].message.content or "").strip()
        if not msg:
            raise EmptyResult("OpenAI returned an empty answer")
        usage = getattr(resp, "usage", None)
        usage = usage.model_dump() if usage else {}
        return msg, usage
