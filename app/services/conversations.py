"""
Rolling per-session conversation history.

Two independent stores exist at runtime: one for general meeting Q&A, keyed on a
filter fingerprint, and one for transcript Q&A, keyed on the transcript id.
When the key changes (or history is empty) the history is dropped so the next
prompt carries full context again.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from app.ports import SessionStorePort

MAX_HISTORY_TURNS = 20


@dataclass
class ConversationState:
    history: List[Dict[str, str]] = field(default_factory=list)
    context: Optional[str] = None

    @property
    def transcript_id(self) -> Optional[str]:
        return self.context

    @property
    def turns(self) -> int:
        return len(self.history) // 2


def filters_fingerprint(
    date_from: str = "",
    date_to: str = "",
    type: str = "all",
    countries: str = "",
    topic: str = "",
) -> str:
    return json.dumps(
        {"from": date_from, "to": date_to, "type": type, "countries": countries, "topic": topic},
        sort_keys=True,
    )


class ConversationStore:
    def __init__(self, store: SessionStorePort, max_turns: int = MAX_HISTORY_TURNS):
        self.store = store
        self.max_turns = max_turns

    def get(self, session_id: str) -> ConversationState:
        state = self.store.get(session_id)
        if state is None:
            state = ConversationState()
            self.store.put(session_id, state)
        return state

    def clear(self, session_id: str) -> Dict[str, bool]:
        self.store.delete(session_id)
        return {"cleared": True}

    def begin_turn(self, session_id: str, context_key: str) -> Tuple[ConversationState, bool]:
        """
        Return the session state and whether this turn starts a new conversation.
        A new conversation empties the history and records `context_key`.
        """
        state = self.get(session_id)
        is_new = state.context != context_key or not state.history
        if is_new:
            state.context = context_key
            state.history = []
            self.store.put(session_id, state)
        return state, is_new

    def append(self, session_id: str, user_text: str, model_text: str) -> ConversationState:
        state = self.get(session_id)
        state.history.append({"role": "user", "text": user_text})
        state.history.append({"role": "model", "text": model_text})
        cap = 2 * self.max_turns
        if len(state.history) > cap:
            state.history = state.history[-cap:]
        self.store.put(session_id, state)
        return state
