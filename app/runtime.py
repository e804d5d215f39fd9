"""
app/runtime.py

Behavioural knobs loaded from configs/runtime.yaml (credentials stay in the environment).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from app.services.prompting import DEFAULT_PROFILE


@dataclass
class RuntimeConfig:
    llm_adapter: str = "gemini"
    llm_model: str = "gemini-2.0-flash"
    temperature: float = 0.2
    timeout: Optional[float] = None
    default_limit: int = 10
    max_limit: int = 50
    max_content_checks: int = 200
    search_preview_chars: int = 500
    max_depth: int = 4
    max_turns: int = 20
    preview_chars: int = 700
    answer_chars: int = 1800
    max_transcript_chars: int = 120000
    profile: str = DEFAULT_PROFILE
    reports_limit: int = 50

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "RuntimeConfig":
        llm = cfg.get("llm", {}) or {}
        http = cfg.get("http", {}) or {}
        search = cfg.get("search", {}) or {}
        conv = cfg.get("conversation", {}) or {}
        prompts = cfg.get("prompts", {}) or {}
        notes = cfg.get("notes", {}) or {}
        base = cls()
        values = dict(
            llm_adapter=(llm.get("adapter") or base.llm_adapter).lower(),
            llm_model=llm.get("model", base.llm_model),
            temperature=float(llm.get("temperature", base.temperature)),
            timeout=http.get("timeout", base.timeout),
            default_limit=int(search.get("default_limit", base.default_limit)),
            max_limit=int(search.get("max_limit", base.max_limit)),
            max_content_checks=int(search.get("max_content_checks", base.max_content_checks)),
            search_preview_chars=int(search.get("preview_chars", base.search_preview_chars)),
            max_depth=int(search.get("max_depth", base.max_depth)),
            max_turns=int(conv.get("max_turns", base.max_turns)),
            preview_chars=int(prompts.get("preview_chars", base.preview_chars)),
            answer_chars=int(prompts.get("answer_chars", base.answer_chars)),
            max_transcript_chars=int(prompts.get("max_transcript_chars", base.max_transcript_chars)),
            profile=prompts.get("profile") or base.profile,
            reports_limit=int(notes.get("reports_limit", base.reports_limit)),
        )
        return cls(**values)


def _load_cfg(cfg_path: str | Path) -> Dict[str, Any]:
    p = Path(cfg_path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"Runtime config not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_runtime_config(cfg_path: str | Path) -> RuntimeConfig:
    return RuntimeConfig.from_dict(_load_cfg(cfg_path))
