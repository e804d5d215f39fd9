"""
app/errors.py

Error taxonomy for the Meeting Insights API.
Every action either succeeds fully or raises one of these; the /api router
renders them as {"ok": false, "error": str(exc)}.
"""

from __future__ import annotations


class InsightsError(Exception):
    """Base class for errors reported back to the caller."""


class ConfigurationMissing(InsightsError):
    """A required credential or environment value is absent."""


class BackendUnavailable(InsightsError):
    """The document source cannot be reached or is not configured."""


class UpstreamHttpError(InsightsError):
    """Supabase or the LLM API answered with a non-success status."""

    def __init__(self, service: str, status: int, body: str = ""):
        self.service = service
        self.status = status
        self.body = (body or "")[:300]
        super().__init__(f"{service} HTTP {status}: {self.body}")


class EmptyResult(InsightsError):
    """An upstream call or read produced nothing usable."""


class NotFound(InsightsError):
    """Unknown action."""


class InvalidRequest(InsightsError):
    """Required request parameter missing."""


class TranscriptReadError(InsightsError):
    """A single transcript could not be read from its backend."""
