# -*- coding: utf-8 -*-
from __future__ import annotations
import os, json, base64, tempfile, threading
from pathlib import Path
from datetime import datetime
from typing import Optional
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from dotenv import load_dotenv

from guess_relay.errors import InvalidInput, RelayError, ServerError
from guess_relay.guess_logging import GuessLogger
from guess_relay.relay import GuessRelay
from guess_relay.schemas import ErrorResponse, GuessRequest, GuessResponse, Health


# ------------------------------ Environment --------------------------------- #
# Load .env from the project root so working directory changes do not break configuration.
_root = Path(__file__).resolve().parents[1]  # Project root (one level above guess_relay/).
load_dotenv(_root / ".env")

app = FastAPI(title="Sketch Guess Relay", version="0.1.0")

# CORS configuration (development friendly).
# Supported modes:
#   1) CORS_ORIGINS="*"          -> allow all origins, credentials disabled.
#   2) CORS_ORIGINS empty         -> allow localhost/127.0.0.1 on any port.
#   3) CORS_ORIGINS=a,b,c         -> allow only the listed origins.
_env_cors = os.getenv("CORS_ORIGINS", "").strip()
if _env_cors == "*":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
elif _env_cors:
    origins = [o.strip() for o in _env_cors.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^http://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

LOG_IO = os.getenv("LOG_IO", "true").lower() in ("1", "true", "yes")
# Log directory resolution:
# - If LOGS_DIR is set:
#     * Absolute path -> use as-is.
#     * Relative path -> resolve from the project root.
# - Otherwise fall back to the system temp directory.
_logs_env = os.getenv("LOGS_DIR", "").strip()
if _logs_env:
    p = Path(_logs_env)
    _LOGS_DIR = p if p.is_absolute() else (_root / p)
else:
    _LOGS_DIR = Path(tempfile.gettempdir()) / "logs"


# ------------------------------ Helpers --------------------------------- #
def _now_id() -> str:
    # 20251011-233045-123
    return datetime.now().strftime("%Y%m%d-%H%M%S-%f")[:-3]


def _write_json(dirpath: Path, name: str, data) -> None:
    dirpath.mkdir(parents=True, exist_ok=True)
    with (dirpath / name).open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def _save_image(dirpath: Path, image_data: str) -> None:
    b64 = image_data.split(",", 1)[1] if image_data.startswith("data:") else image_data
    dirpath.mkdir(parents=True, exist_ok=True)
    with open(dirpath / "input.image.png", "wb") as f:
        f.write(base64.b64decode(b64))


# One logger per process: its lock is what serialises appends from the worker threadpool.
_guess_logger: Optional[GuessLogger] = None
_guess_logger_lock = threading.Lock()


def _get_guess_logger() -> GuessLogger:
    global _guess_logger
    with _guess_logger_lock:
        if _guess_logger is None or _guess_logger.base_dir != _LOGS_DIR:
            _guess_logger = GuessLogger(base_dir=_LOGS_DIR)
        return _guess_logger


def _log_outcome(call_id: str, event: str, payload: dict) -> None:
    if not LOG_IO:
        return
    try:
        _get_guess_logger().log(event, payload, call_id=call_id)
    except Exception as e:
        print(f"[warn] failed to write guess log: {e}")


def get_relay() -> GuessRelay:
    # Settings are read per request so .env edits and test monkeypatching apply without a restart.
    return GuessRelay()


# ------------------------------ Error envelope --------------------------------- #
@app.exception_handler(RelayError)
async def _relay_error(request: Request, exc: RelayError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def _invalid_body(request: Request, exc: RequestValidationError):
    # Missing/non-string imageBase64 and unparsable bodies all read as bad input.
    return JSONResponse(status_code=InvalidInput.status_code, content=InvalidInput().to_payload())


@app.exception_handler(Exception)
async def _unhandled_except(request: Request, exc: Exception):
    import traceback
    traceback.print_exc()
    return JSONResponse(status_code=500, content=ServerError().to_payload())


# ------------------------------ Endpoints --------------------------------- #
@app.get("/health", response_model=Health)
def health():
    return Health(
        status="ok",
        model=os.getenv("OPENAI_MODEL") or "unset",
        base_url=os.getenv("OPENAI_BASE_URL") or "unset",
    )


@app.options("/guess")
def guess_options():
    # Return 204 for OPTIONS so preflight requests succeed with proper CORS headers.
    return Response(status_code=204)


@app.post(
    "/guess",
    response_model=GuessResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def guess(req: GuessRequest, relay: GuessRelay = Depends(get_relay)):
    call_id = _now_id()
    if LOG_IO:
        try:
            _save_image(_LOGS_DIR / call_id, req.image_base64)
        except Exception as e:
            print(f"[warn] failed to save guess image: {e}")

    try:
        result = relay.guess(req.image_base64)
    except RelayError as e:
        _log_outcome(call_id, "guess.error", {"status": e.status_code, **e.to_payload()})
        raise

    _log_outcome(call_id, "guess.ok", {"stage": result.stage, **result.to_payload()})
    if LOG_IO:
        try: _write_json(_LOGS_DIR / call_id, "output.json", result.to_payload())
        except Exception: pass
    return GuessResponse(guess=result.guess, confidence=result.confidence)
