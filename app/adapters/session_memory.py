"""
app/adapters/session_memory.py

In-process SessionStorePort used for both conversation stores.
"""

from typing import Any, Dict, Optional

from app.ports import SessionStorePort


class InMemorySessionStore(SessionStorePort):
    """Process-local session map. Lost on restart; no locking."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, session_id: str) -> Optional[Any]:
        return self._data.get(session_id)

    def put(self, session_id: str, state: Any) -> None:
        self._data[session_id] = state

    def delete(self, session_id: str) -> None:
        self._data.pop(session_id, None)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._data
