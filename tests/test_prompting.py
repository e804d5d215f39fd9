from app.services.prompting import (
    build_meeting_followup,
    build_meeting_prompt,
    build_transcript_followup,
    build_transcript_prompt,
    format_item,
    prepare_transcript,
)

ITEMS = [
    {"title": "Partner call", "date_iso": "2024-01-05", "countries": "Spain, Italy", "summary_text": "Talked\n\nabout   hiring."},
    {"title": "Board sync", "date_iso": "2024-01-09", "countries": "", "summary_text": "x" * 2000},
]


def test_format_item_header_and_summary():
    assert format_item(1, ITEMS[0]) == "[1] Partner call — 2024-01-05 — Spain, Italy\nTalked about hiring."
    line = format_item(2, ITEMS[1])
    header, summary = line.split("\n")
    assert header == "[2] Board sync — 2024-01-09"
    assert len(summary) == 700
    assert summary.endswith("…")


def test_meeting_prompt_sections():
    prompt = build_meeting_prompt("  What about hiring? ", ITEMS, "short", profile="I run partnerships.")
    assert prompt.startswith("Answer the user's question using ONLY the Items below.")
    assert "CONTEXT:\nI run partnerships." in prompt
    assert "Keep the answer concise (≤ 150 words)." in prompt
    assert "Question:\nWhat about hiring?" in prompt
    assert "Items:\n[1] Partner call" in prompt
    assert prompt.endswith("Remember: Use bullets and bold formatting. Make it easy to scan.")


def test_meeting_prompt_long_style():
    prompt = build_meeting_prompt("q", [], "normal")
    assert "Be reasonably thorough (≤ 1800 characters)." in prompt


def test_followups_carry_only_question():
    follow = build_meeting_followup(" next? ")
    assert "next?" in follow
    assert "Items:" not in follow
    assert "[n]" in follow
    t_follow = build_transcript_followup("and then?")
    assert t_follow.startswith("Follow-up question about the same transcript:")
    assert "Transcript:" not in t_follow


def test_transcript_prompt_keeps_tail():
    raw = "A" * 10 + "\r\n" + "B" * 200
    text = prepare_transcript(raw, max_chars=100)
    assert len(text) == 100
    assert set(text) == {"B"}
    assert "\r" not in prepare_transcript("a\r\nb")

    prompt = build_transcript_prompt("Who spoke?", "hello there", profile="me")
    assert 'Transcript:\n"""\nhello there\n"""' in prompt
    assert "CONTEXT: me" in prompt
    assert "If not clearly in the transcript, say so briefly." in prompt
