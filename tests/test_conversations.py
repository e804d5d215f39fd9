import pytest

from app.adapters.session_memory import InMemorySessionStore
from app.services.conversations import ConversationState, ConversationStore, filters_fingerprint


@pytest.fixture()
def store():
    return ConversationStore(InMemorySessionStore(), max_turns=20)


def test_get_creates_lazily(store):
    assert "s1" not in store.store
    state = store.get("s1")
    assert state == ConversationState()
    assert "s1" in store.store
    assert store.get("s1") is state


def test_append_keeps_pairs_and_caps_history(store):
    for i in range(25):
        state = store.append("s1", f"q{i}", f"a{i}")
        assert len(state.history) % 2 == 0
        assert len(state.history) <= 40
    assert len(state.history) == 40
    assert state.history[0] == {"role": "user", "text": "q5"}
    assert state.history[-1] == {"role": "model", "text": "a24"}
    assert state.turns == 20


def test_clear_then_get_is_fresh(store):
    store.begin_turn("s1", "ctx")
    store.append("s1", "q", "a")
    assert store.clear("s1") == {"cleared": True}
    assert "s1" not in store.store
    assert store.get("s1") == ConversationState()


def test_begin_turn_resets_on_context_change(store):
    state, is_new = store.begin_turn("s1", "k1")
    assert is_new and state.context == "k1"
    store.append("s1", "q1", "a1")

    state, is_new = store.begin_turn("s1", "k1")
    assert not is_new
    assert len(state.history) == 2

    state, is_new = store.begin_turn("s1", "k2")
    assert is_new
    assert state.history == []
    assert state.transcript_id == "k2"


def test_begin_turn_with_empty_history_is_new(store):
    store.begin_turn("s1", "k1")
    _, is_new = store.begin_turn("s1", "k1")
    assert is_new


def test_sessions_are_independent(store):
    store.append("a", "q", "a")
    assert store.get("b").history == []


def test_fingerprint_is_stable_and_sensitive():
    a = filters_fingerprint("2024-01-01", "", "all", "Spain", "")
    assert a == filters_fingerprint("2024-01-01", "", "all", "Spain", "")
    assert a != filters_fingerprint("2024-01-01", "", "all", "Spain", "budget")


def test_memory_store_clear_drops_everything():
    mem = InMemorySessionStore()
    mem.put("a", 1)
    mem.put("b", 2)
    mem.clear()
    assert len(mem) == 0
    mem.delete("missing")
