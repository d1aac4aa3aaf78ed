# -*- coding: utf-8 -*-
from __future__ import annotations
import base64
import binascii
import traceback
from typing import Optional, Union

import httpx

from guess_relay import prompting
from guess_relay.errors import InvalidInput, RelayError, ServerError
from guess_relay.llm_client import RelaySettings, call_chat_completions
from guess_relay.reply_parser import GuessResult, normalize_reply


def _encode_payload(image: Union[bytes, str, None]) -> str:
    """Return the base64 body (or an untouched data URL) after checking it carries bytes."""
    if isinstance(image, (bytes, bytearray)):
        if not image:
            raise InvalidInput()
        return base64.b64encode(bytes(image)).decode("ascii")
    if not isinstance(image, str) or not image.strip():
        raise InvalidInput()
    b64 = image.strip()
    if b64.startswith("data:"):
        if "," not in b64:
            raise InvalidInput("imageBase64 is not a valid data URL")
        body = b64.split(",", 1)[1]
    else:
        body = b64
    try:
        decoded = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInput("imageBase64 is not valid base64")
    if not decoded:
        raise InvalidInput()
    return b64


class GuessRelay:
    """
    Stateless: one instance may serve any number of calls, each independent.
    The optional http_client is handed to the OpenAI SDK (tests inject mocked transports this way).
    """

    def __init__(self, settings: Optional[RelaySettings] = None, *, http_client: Optional[httpx.Client] = None) -> None:
        self.settings = settings or RelaySettings.from_env()
        self.http_client = http_client

    def guess(self, image: Union[bytes, str, None]) -> GuessResult:
        payload = _encode_payload(image)
        try:
            messages = prompting.build_guess_messages(payload)
            content, _dbg = call_chat_completions(messages, self.settings, http_client=self.http_client)
            return normalize_reply(content)
        except RelayError:
            raise
        except Exception as e:
            # Print the stack trace so terminal logs reveal root causes; the caller only sees a generic error.
            traceback.print_exc()
            raise ServerError() from e
