# guess_relay/llm_client.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import json, os, time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
from openai import OpenAI, APIStatusError

from guess_relay.errors import Misconfigured, UpstreamError

DEFAULT_MODEL = "gpt-4o-mini"
TEMPERATURE = 0.2
MAX_TOKENS = 64


# ---------------------------------------- Configuration ---------------------------------------- #
@dataclass(frozen=True)
class RelaySettings:
    base_url: str = ""
    api_key: str = ""
    model: str = DEFAULT_MODEL

    @classmethod
    def from_env(cls) -> "RelaySettings":
        return cls(
            base_url=(os.getenv("OPENAI_BASE_URL") or "").strip(),
            api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
            model=(os.getenv("OPENAI_MODEL") or "").strip() or DEFAULT_MODEL,
        )

    def require(self) -> None:
        """Presence check only; values are not probed against the network."""
        if not self.base_url or not self.api_key:
            raise Misconfigured()

    @property
    def api_base(self) -> str:
        # The SDK appends /chat/completions, so this yields {base}/v1/chat/completions.
        return f"{self.base_url.rstrip('/')}/v1"


# ---------------------------------------- LLM client helpers ---------------------------------------- #
def _get_client(settings: RelaySettings, http_client: Optional[httpx.Client] = None) -> OpenAI:
    settings.require()
    # Configure HTTPS_PROXY/HTTP_PROXY in the environment when a proxy is required; httpx will read it automatically.
    return OpenAI(
        api_key=settings.api_key,
        base_url=settings.api_base,
        max_retries=0,
        http_client=http_client,
    )


# ---------------------------------------- Logging helpers ---------------------------------------- #
def _maybe_log(debug: Dict[str, Any]) -> None:
    """Persist raw request/response debug data when LOG_LLM is enabled."""
    try:
        if os.getenv("LOG_LLM", "").strip() not in ("1", "true", "yes", "on"):
            return
        Path("logs").mkdir(exist_ok=True)
        ts = time.strftime("%Y%m%d_%H%M%S")
        fn = Path("logs") / f"llm_{ts}.json"
        with open(fn, "w", encoding="utf-8") as f:
            json.dump(debug, f, ensure_ascii=False, indent=2)
    except Exception:
        # Logging failures should not impact primary flow
        pass


def _extract_content(resp: Any) -> Any:
    """Pull choices[0].message.content; a missing choice reads as an empty reply."""
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return ""
    content = choices[0].message.content
    return "" if content is None else content


def call_chat_completions(
    messages: List[Dict[str, Any]],
    settings: RelaySettings,
    *,
    http_client: Optional[httpx.Client] = None,
) -> tuple[Any, Dict[str, Any]]:
    """Single /v1/chat/completions call, no retry. Returns (message_content, debug_info)."""
    client = _get_client(settings, http_client)  # Build a fresh client per call to avoid import-time issues
    try:
        resp = client.chat.completions.create(
            model=settings.model,
            messages=messages,
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
            response_format={"type": "json_object"},
        )
    except APIStatusError as e:
        raise UpstreamError(e.response.text, upstream_status=e.status_code) from e

    content = _extract_content(resp)
    debug = {
        "raw_text": content if isinstance(content, str) else json.dumps(content, ensure_ascii=False),
        "response_id": getattr(resp, "id", None),
        "model": settings.model,
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
        # Drop the image part; base64 payloads bloat the debug dump.
        "prompt": messages[0]["content"][0]["text"] if messages else None,
    }
    _maybe_log(debug)
    return content, debug
