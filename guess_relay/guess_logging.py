from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


class GuessLogger:
    """
    JSON-lines log of relay outcomes.
    Each entry is appended to <base_dir>/guess_YYYYMMDD.log.
    """

    def __init__(self, *, base_dir: Path) -> None:
        self.base_dir = base_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def log(self, event: str, payload: Dict[str, Any], *, call_id: Optional[str] = None) -> None:
        now = datetime.now(timezone.utc)
        entry: Dict[str, Any] = {
            "ts": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "event": event,
        }
        if call_id:
            entry["call"] = call_id
        entry.update(payload)
        line = json.dumps(entry, ensure_ascii=False)
        path = self.base_dir / f"guess_{now.strftime('%Y%m%d')}.log"
        with self._lock, path.open("a", encoding="utf-8") as fp:
            fp.write(line + "\n")
