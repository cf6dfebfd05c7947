from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import PlanContext, context_from_dict, context_to_dict, empty_context, today_key

logger = logging.getLogger(__name__)

KEY_PREFIX = "daily-bot:"


def day_key(day: str) -> str:
    return f"{KEY_PREFIX}{day}"


class DayStore:
    """JSON file holding one document per day, keyed ``daily-bot:<date>``."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load_payload(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable day file {self.path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring day file {self.path}: top level is not an object")
            return {}
        return raw

    def _save_payload(self, payload: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n", encoding="utf-8")
            os.replace(tmp, self.path)
        finally:
            # Only left behind when the write or the rename failed
            if tmp.exists():
                tmp.unlink()

    def load(self, day: Optional[str] = None) -> PlanContext:
        day = day or today_key()
        doc = self._load_payload().get(day_key(day))
        if not isinstance(doc, dict):
            return empty_context(day, seed_habits=True)
        # The date lives in the key, not the document
        return context_from_dict({**doc, "date": day})

    def save(self, ctx: PlanContext) -> None:
        payload = self._load_payload()
        doc = context_to_dict(ctx)
        doc.pop("date", None)
        payload[day_key(ctx.date)] = doc
        self._save_payload(payload)
