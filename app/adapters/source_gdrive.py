"""
app/adapters/source_gdrive.py

Google Drive transcript backend (read-only service account).

Folders are traversed with an explicit (folder_id, depth) worklist, paginating
each listing until Drive stops returning a nextPageToken. Google Docs are
exported to plain text; every other file is downloaded and decoded as UTF-8.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.errors import BackendUnavailable, TranscriptReadError
from app.ports import DocumentSourcePort, SourceEntry, has_transcript_extension
from app.services.dates import parse_iso

logger = logging.getLogger(__name__)

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive.readonly"
FOLDER_MIME = "application/vnd.google-apps.folder"
DOCS_MIME = "application/vnd.google-apps.document"
ID_PREFIX = "gdrive:"
PAGE_SIZE = 200
DEFAULT_MAX_DEPTH = 4


def load_service_account_info(settings: Any) -> Optional[Dict[str, Any]]:
    """
    Resolve service-account credentials from settings, first match wins:
    1. GOOGLE_SERVICE_ACCOUNT_KEY_FILE (path to the JSON key)
    2. GOOGLE_SERVICE_ACCOUNT_KEY_JSON (the JSON itself)
    3. GOOGLE_SERVICE_ACCOUNT_EMAIL + GOOGLE_PRIVATE_KEY
    Sources that fail to parse are logged and skipped.
    """
    key_file = getattr(settings, "google_service_account_key_file", None)
    if key_file:
        try:
            return json.loads(Path(key_file).expanduser().read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to read key file %s: %s", key_file, exc)

    key_json = getattr(settings, "google_service_account_key_json", None)
    if key_json:
        try:
            return json.loads(key_json)
        except ValueError as exc:
            logger.error("Failed to parse GOOGLE_SERVICE_ACCOUNT_KEY_JSON: %s", exc)

    email = getattr(settings, "google_service_account_email", None)
    key = (getattr(settings, "google_private_key", None) or "").replace("\\n", "\n").strip()
    if email and key and "PRIVATE KEY" in key:
        return {
            "type": "service_account",
            "client_email": email,
            "private_key": key,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    return None


def strip_prefix(entry_id: str) -> str:
    return entry_id[len(ID_PREFIX):] if entry_id.startswith(ID_PREFIX) else entry_id


def is_transcript(name: str, mime_type: str) -> bool:
    return has_transcript_extension(name) or mime_type == DOCS_MIME


class GoogleDriveSource(DocumentSourcePort):
    kind = "gdrive"

    def __init__(
        self,
        folder_id: Optional[str],
        credentials_info: Optional[Dict[str, Any]] = None,
        *,
        service: Any = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        if not folder_id or (service is None and not credentials_info):
            raise BackendUnavailable("Google Drive not configured")
        self.folder_id = folder_id
        self.max_depth = max_depth
        self._service = service or self._build_service(credentials_info)

    @staticmethod
    def _build_service(info: Dict[str, Any]) -> Any:
        try:
            creds = Credentials.from_service_account_info(info, scopes=[DRIVE_SCOPE])
        except (ValueError, KeyError) as exc:
            raise BackendUnavailable(f"Google Drive credentials invalid: {exc}") from exc
        return build("drive", "v3", credentials=creds, cache_discovery=False)

    def _list_page(self, folder_id: str, page_token: Optional[str]) -> Dict[str, Any]:
        try:
            return (
                self._service.files()
                .list(
                    q=f"'{folder_id}' in parents and trashed = false",
                    fields="nextPageToken, files(id, name, mimeType, modifiedTime, size)",
                    pageSize=PAGE_SIZE,
                    orderBy="modifiedTime desc",
                    pageToken=page_token,
                )
                .execute()
            )
        except HttpError as exc:
            raise BackendUnavailable(f"Google Drive error: {exc}") from exc

    def list_all(self, root: Optional[str] = None) -> Iterator[SourceEntry]:
        stack: List[Tuple[str, int]] = [(root or self.folder_id, 0)]
        while stack:
            folder_id, depth = stack.pop()
            if depth >= self.max_depth:
                continue
            subfolders: List[str] = []
            page_token = None
            while True:
                data = self._list_page(folder_id, page_token)
                for f in data.get("files") or []:
                    mime = f.get("mimeType") or ""
                    if mime == FOLDER_MIME:
                        subfolders.append(f["id"])
                        continue
                    name = f.get("name") or ""
                    if not is_transcript(name, mime):
                        continue
                    yield SourceEntry(
                        id=ID_PREFIX + f["id"],
                        name=name,
                        mime_type=mime or "text/plain",
                        modified=parse_iso(f.get("modifiedTime")),
                        link=f"https://drive.google.com/file/d/{f['id']}/view",
                        reported_modified=f.get("modifiedTime") or None,
                    )
                page_token = data.get("nextPageToken")
                if not page_token:
                    break
            for sub in reversed(subfolders):
                stack.append((sub, depth + 1))

    def read(self, entry_id: str) -> str:
        file_id = strip_prefix(entry_id)
        files = self._service.files()
        try:
            meta = files.get(fileId=file_id, fields="mimeType").execute()
            if meta.get("mimeType") == DOCS_MIME:
                body = files.export_media(fileId=file_id, mimeType="text/plain").execute()
            else:
                body = files.get_media(fileId=file_id).execute()
        except (HttpError, OSError, GoogleAuthError) as exc:
            raise TranscriptReadError(f"Google Drive error: {exc}") from exc
        if isinstance(body, bytes):
            return body.decode("utf-8", errors="replace")
        return str(body or "")
