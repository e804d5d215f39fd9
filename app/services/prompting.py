"""
Prompt templates for meeting Q&A and transcript Q&A.

The first turn of a conversation carries the full context (retrieved items or the
transcript text); follow-ups send only the new question and rely on the history
that the LLM adapter replays.
"""

from typing import Any, Dict, Iterable

from app.services.formatting import clip, collapse_whitespace, tail

PREVIEW_LEN = 700
ANSWER_LEN = 1800
MAX_TRANSCRIPT_CHARS = 120000

DEFAULT_PROFILE = (
    "I am a Network Engagement Lead. Any references to me by name refer to the reader of this answer. "
    "I manage relationships with partner organizations and work with their CEOs to deepen network "
    "engagement and foster collaborative learning."
)

MEETING_RULES = "\n".join([
    "FORMATTING RULES (MUST FOLLOW):",
    "- Return clean HTML only (no Markdown fences or code blocks)",
    "- ALWAYS use bullet points (<ul><li>) for lists of items or updates",
    "- ALWAYS use <strong> tags to bold key names, dates, topics, and important terms",
    "- Use <h4> for section headers when organizing multiple topics",
    "- Keep paragraphs short and scannable",
    "- When citing sources, use [n] format with the number in bold: <strong>[1]</strong>",
    "- Example format:",
    "  <h4>Topic Name</h4>",
    "  <ul>",
    "    <li><strong>Key Person</strong> discussed <strong>Important Topic</strong> on <strong>Date</strong> [1]</li>",
    "  </ul>",
])

TRANSCRIPT_RULES = "\n".join([
    "FORMATTING RULES (MUST FOLLOW):",
    "- Return clean HTML only (no Markdown fences or code blocks)",
    "- ALWAYS use bullet points (<ul><li>) for lists",
    "- ALWAYS use <strong> tags to bold key names, dates, topics, and important terms",
    "- Use <h4> for section headers when organizing multiple topics",
    "- Keep paragraphs short and scannable",
    "- Example format:",
    "  <h4>Topic Name</h4>",
    "  <ul>",
    "    <li><strong>Person Name</strong> discussed <strong>Topic</strong></li>",
    "  </ul>",
])

REMINDER = "Remember: Use bullets and bold formatting. Make it easy to scan."

MEETING_FOLLOWUP_TPL = (
    "Follow-up question (use the same data context from our conversation):\n\n"
    "{question}\n\n"
    "Remember to return clean HTML and cite sources using [n] format if relevant."
)

TRANSCRIPT_FOLLOWUP_TPL = (
    "Follow-up question about the same transcript:\n\n"
    "{question}\n\n"
    "Remember: Return clean HTML with bullets and bold formatting. Make it easy to scan."
)


def brevity_directive(style: str, answer_len: int = ANSWER_LEN) -> str:
    if style == "short":
        return "Keep the answer concise (≤ 150 words)."
    return f"Be reasonably thorough (≤ {answer_len} characters)."


def format_item(index: int, item: Dict[str, Any], preview_len: int = PREVIEW_LEN) -> str:
    """`[n] title — date[ — countries]` followed by the clipped summary on the next line."""
    countries = item.get("countries") or ""
    header = f"[{index}] {item.get('title', '')} — {item.get('date_iso', '')}"
    if countries:
        header += f" — {countries}"
    summary = clip(collapse_whitespace(item.get("summary_text") or ""), preview_len)
    return f"{header}\n{summary}"


def build_meeting_prompt(
    question: str,
    items: Iterable[Dict[str, Any]],
    style: str = "normal",
    *,
    profile: str = DEFAULT_PROFILE,
    preview_len: int = PREVIEW_LEN,
    answer_len: int = ANSWER_LEN,
) -> str:
    items_block = "\n\n".join(
        format_item(i, it, preview_len) for i, it in enumerate(items, start=1)
    )
    return "\n".join([
        "Answer the user's question using ONLY the Items below.",
        "",
        MEETING_RULES,
        "",
        "CONTEXT:",
        profile.strip(),
        "",
        brevity_directive(style, answer_len),
        "",
        "Question:", (question or "").strip(),
        "",
        "Items:", items_block,
        "",
        REMINDER,
    ])


def build_meeting_followup(question: str) -> str:
    return MEETING_FOLLOWUP_TPL.format(question=(question or "").strip())


def prepare_transcript(raw: str, max_chars: int = MAX_TRANSCRIPT_CHARS) -> str:
    """Drop carriage returns and keep the tail when the transcript is too long."""
    return tail((raw or "").replace("\r", ""), max_chars)


def build_transcript_prompt(question: str, transcript: str, *, profile: str = DEFAULT_PROFILE) -> str:
    return "\n".join([
        "You answer questions about a meeting transcript.",
        "",
        TRANSCRIPT_RULES,
        "",
        "If not clearly in the transcript, say so briefly.",
        "",
        f"CONTEXT: {profile.strip()}",
        "",
        "Question:", (question or "").strip(),
        "",
        "Transcript:", '"""', transcript, '"""',
        "",
        REMINDER,
    ])


def build_transcript_followup(question: str) -> str:
    return TRANSCRIPT_FOLLOWUP_TPL.format(question=(question or "").strip())
