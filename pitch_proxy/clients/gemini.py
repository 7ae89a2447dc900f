from __future__ import annotations

import time

from google import genai
from google.genai import types

from pitch_proxy.error_codes import EMPTY_INPUT, GEMINI_DISABLED
from pitch_proxy.logging_utils import log_event
from pitch_proxy.markdown_text import markdown_to_plain_text


def generate_plain_text(
    prompt: str | None,
    system_instruction: str | None,
    *,
    api_key: str | None,
    model: str,
) -> str:
    """
    Call Gemini and return the answer as plain text.

    Contract:
    - Returns "" (and logs) when the key, prompt or system instruction is missing
    - Raises on any SDK / network error; the caller decides the HTTP status
    - Blocking; run it in a worker thread from async code
    """
    if not api_key:
        log_event("gemini_disabled", reason="GEMINI_KEY not set", code=GEMINI_DISABLED)
        return ""
    if not prompt:
        log_event("gemini_empty_input", reason="empty prompt", code=EMPTY_INPUT)
        return ""
    if not system_instruction:
        log_event("gemini_empty_input", reason="empty system instruction", code=EMPTY_INPUT)
        return ""

    t0 = time.perf_counter()
    raw = _call_gemini(prompt, system_instruction, api_key=api_key, model=model)
    log_event("gemini_call", model=model, status="ok", latency_ms=_elapsed_ms(t0), chars=len(raw))

    return markdown_to_plain_text(raw.strip())


def _call_gemini(prompt: str, system_instruction: str, *, api_key: str, model: str) -> str:
    """Make the SDK call. Returns raw response text. Raises on error."""
    client = genai.Client(api_key=api_key)
    response = client.models.generate_content(
        model=model,
        contents=prompt,
        config=types.GenerateContentConfig(system_instruction=system_instruction),
    )
    return response.text or ""


def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)
