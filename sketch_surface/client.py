from __future__ import annotations

from typing import Any, Optional

import httpx

from .models import NETWORK_ERROR_TEXT, SERVER_ERROR_TEXT, UNDETERMINED, GuessResult
from .surface import DrawingSurface


def _result_from_body(data: Any) -> GuessResult:
    if not isinstance(data, dict):
        return GuessResult(guess=UNDETERMINED)
    guess = data.get("guess")
    confidence = data.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        confidence = None
    return GuessResult(
        guess=UNDETERMINED if guess is None else str(guess),
        confidence=None if confidence is None else float(confidence),
    )


class GuessClient:
    """
    Posts the surface's PNG to the relay and writes whatever comes back into
    the surface's display state. Failures become placeholder guesses; no retry.
    """

    def __init__(self, relay_url: str, *, http_client: Optional[httpx.Client] = None) -> None:
        self.relay_url = relay_url.rstrip("/")
        self._client = http_client or httpx.Client()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GuessClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _post(self, surface: DrawingSurface) -> GuessResult:
        try:
            resp = self._client.post(
                f"{self.relay_url}/guess",
                json={"imageBase64": surface.export_base64()},
            )
            if not resp.is_success:
                print(f"[guess] relay returned {resp.status_code}: {resp.text}")
                return GuessResult(guess=SERVER_ERROR_TEXT)
            return _result_from_body(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            print(f"[guess] request failed: {e}")
            return GuessResult(guess=NETWORK_ERROR_TEXT)

    def request_guess(self, surface: DrawingSurface) -> GuessResult:
        surface.begin_guess()
        try:
            result = self._post(surface)
        finally:
            surface.loading = False
        surface.show_guess(result)
        return result
