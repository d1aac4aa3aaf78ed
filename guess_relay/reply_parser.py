"""
Two-stage normalisation of the model's reply into ``{guess, confidence}``.

Stage one decodes the reply as JSON; stage two builds the same result
from the raw text when the reply does not parse at all. Models that ignore
``response_format`` still produce a usable guess this way.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from guess_relay.prompting import UNDETERMINED

MAX_GUESS_CHARS = 16

STAGE_STRUCTURED = "structured"
STAGE_FALLBACK = "fallback"


@dataclass
class GuessResult:
    guess: str
    confidence: Optional[float] = None
    stage: str = STAGE_STRUCTURED

    def to_payload(self) -> Dict[str, Any]:
        return {"guess": self.guess, "confidence": self.confidence}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _clip_guess(value: Any) -> str:
    text = _as_text(value).strip()[:MAX_GUESS_CHARS].strip()
    return text or UNDETERMINED


def _as_confidence(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


_NOT_JSON = object()


def _decode(content: Any) -> Any:
    """Decoded JSON value, or _NOT_JSON when the reply does not parse."""
    if isinstance(content, dict):
        return content
    if not isinstance(content, str) or not content.strip():
        return _NOT_JSON
    try:
        return json.loads(content)
    except ValueError:
        return _NOT_JSON


def parse_structured(content: Any) -> Optional[GuessResult]:
    """Stage one: any reply that parses as JSON. Returns None when it does not parse.

    Only an object can carry fields; a scalar, array or null yields the sentinel.
    """
    decoded = _decode(content)
    if decoded is _NOT_JSON:
        return None
    obj: Dict[str, Any] = decoded if isinstance(decoded, dict) else {}
    return GuessResult(
        guess=_clip_guess(obj.get("guess")),
        confidence=_as_confidence(obj.get("confidence")),
        stage=STAGE_STRUCTURED,
    )


def from_raw_text(content: Any) -> GuessResult:
    """Stage two: the reply text itself is the guess; confidence is unknown."""
    text = content if isinstance(content, str) else ""
    return GuessResult(guess=_clip_guess(text), confidence=None, stage=STAGE_FALLBACK)


def normalize_reply(content: Any) -> GuessResult:
    structured = parse_structured(content)
    if structured is not None:
        return structured
    return from_raw_text(content)
