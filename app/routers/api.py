"""
GET /api?action=...: single action-dispatched endpoint.
Thin FastAPI layer over InsightsService built by app.factory.build_service.
Every response carries `ok`; failures are reported as {"ok": false, "error": ...} with HTTP 200.
"""

import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, Request

from app.errors import InsightsError, NotFound
from app.factory import build_service
from app.services.qa import InsightsService
from app.settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])

ACTIONS: Dict[str, Callable[[InsightsService, Dict[str, Any]], Dict[str, Any]]] = {
    "ask": InsightsService.ask,
    "findtranscripts": InsightsService.find_transcripts,
    "asktranscript": InsightsService.ask_transcript,
    "addnote": InsightsService.add_note,
    "getreports": InsightsService.get_reports,
    "clearconversation": InsightsService.clear_conversation,
    "cleartranscriptconversation": InsightsService.clear_transcript_conversation,
}


def dispatch(service: InsightsService, action: str, params: Dict[str, Any]) -> Dict[str, Any]:
    handler = ACTIONS.get(action)
    if handler is None:
        raise NotFound(f'Unknown action "{action}"')
    return handler(service, params)


@router.get("/api")
def api(request: Request, settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    params = dict(request.query_params)
    action = (params.get("action") or "ask").strip().lower()
    try:
        service = build_service(settings, request.app.state.conversations)
        return dispatch(service, action, params)
    except InsightsError as e:
        logger.warning("[/api] %s failed: %s", action, e)
        return {"ok": False, "error": str(e)}
    except Exception as e:
        # Unexpected failures still come back as a single error payload
        logger.exception("[/api] %s crashed", action)
        return {"ok": False, "error": f"{type(e).__name__}: {e}"}
