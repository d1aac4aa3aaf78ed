# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base for every fault the relay reports to its caller as an error envelope."""

    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None, *, details: Optional[str] = None) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInput(RelayError):
    status_code = 400
    message = "imageBase64 is required"


class Misconfigured(RelayError):
    status_code = 500
    message = "Missing OPENAI_BASE_URL or OPENAI_API_KEY"


class UpstreamError(RelayError):
    # details carries the raw upstream body, kept for debugging.
    status_code = 502
    message = "OpenAI proxy error"

    def __init__(self, details: str, *, upstream_status: Optional[int] = None) -> None:
        super().__init__(details=details)
        self.upstream_status = upstream_status


class ServerError(RelayError):
    status_code = 500
    message = "Server error"
