"""
app/adapters/source_local.py

Local-folder transcript backend.
Walks TRANSCRIPTS_FOLDER with an explicit (path, depth) worklist and reads files as UTF-8 text.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from app.errors import BackendUnavailable, TranscriptReadError
from app.ports import DocumentSourcePort, SourceEntry, has_transcript_extension

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 4


class LocalFolderSource(DocumentSourcePort):
    kind = "local"

    def __init__(self, root: str | Path, max_depth: int = DEFAULT_MAX_DEPTH):
        self.root = Path(root).expanduser()
        self.max_depth = max_depth

    def list_all(self, root: Optional[str] = None) -> Iterator[SourceEntry]:
        base = Path(root).expanduser() if root else self.root
        if not base.is_dir():
            raise BackendUnavailable(f"Transcripts folder not found: {base}")
        return self._walk(base)

    def _walk(self, base: Path) -> Iterator[SourceEntry]:
        # depth 0 is the root; directories deeper than max_depth - 1 are not entered
        stack: List[Tuple[Path, int]] = [(base, 0)]
        while stack:
            folder, depth = stack.pop()
            if depth >= self.max_depth:
                continue
            subdirs: List[Path] = []
            for item in sorted(folder.iterdir(), key=lambda p: p.name):
                if item.is_dir():
                    subdirs.append(item)
                    continue
                if not has_transcript_extension(item.name):
                    continue
                try:
                    mtime = datetime.fromtimestamp(item.stat().st_mtime, tz=timezone.utc)
                except OSError as exc:
                    # dangling symlink or file removed mid-walk
                    logger.debug("skipping %s: %s", item, exc)
                    continue
                yield SourceEntry(
                    id=str(item),
                    name=item.name,
                    mime_type="text/plain",
                    modified=mtime,
                    link=item.resolve().as_uri(),
                )
            # reversed so subfolders are popped in name order
            for sub in reversed(subdirs):
                stack.append((sub, depth + 1))

    def _resolve_path(self, entry_id: str) -> Path:
        root = self.root.resolve()
        candidate = Path(entry_id).expanduser()
        if not candidate.is_absolute():
            candidate = Path.cwd() / candidate
        candidate = candidate.resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            raise TranscriptReadError(f"{entry_id} is outside the transcripts folder")
        return candidate

    def read(self, entry_id: str) -> str:
        path = self._resolve_path(entry_id)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TranscriptReadError(str(exc)) from exc
