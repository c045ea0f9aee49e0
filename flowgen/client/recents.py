"""
Local history of the last workflows generated from this machine.
"""
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Union

from ..config import settings
from ..util.ids import new_id

logger = logging.getLogger(__name__)

MAX_RECENT = 5
TITLE_MAX_CHARS = 50


class RecentWorkflowsCache:
    """
    JSON file holding at most five entries, newest first.

    Every add is a read-modify-write of the whole file; with several writers
    the last one wins.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            entries = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Error reading recent workflows from %s: %s", self.path, exc)
            return []
        if not isinstance(entries, list):
            logger.error("Ignoring recent workflows file %s: expected a list", self.path)
            return []
        return entries

    def add(self, title: str, description: str, workflow: Any) -> Dict[str, Any]:
        entry = {
            "id": new_id("workflow_"),
            "title": title[:TITLE_MAX_CHARS] + ("..." if len(title) > TITLE_MAX_CHARS else ""),
            "description": description,
            "workflow": workflow,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        entries = [entry] + [e for e in self.load() if e.get("id") != entry["id"]]
        self._save(entries[:MAX_RECENT])
        return entry

    def clear(self) -> None:
        self._save([])

    def _save(self, entries: List[Dict[str, Any]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(entries, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Error writing recent workflows to %s: %s", self.path, exc)


def default_recents() -> RecentWorkflowsCache:
    """Cache at RECENT_CACHE_PATH."""
    return RecentWorkflowsCache(settings.recent_cache_path)
