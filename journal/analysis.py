# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver Analysis — remote dream analysis via the Gemini API.

Sends the composed dream text (plus optional life context and re-entry
record) to Gemini with a JSON response schema, and turns the reply into
DreamFragment records with fresh ids.

One request per submission. No retries, no streaming: any failure raises
AnalysisError and the caller decides what to tell the user.
"""

import json
import logging
import os
import urllib.error
import urllib.request
import uuid
from typing import Optional, Dict, Any, List

from pydantic import ValidationError

from core.paths import get_paths
from journal.schemas import (
    AnalysisConfig, AnalysisError, DreamFragment, DreamweaverValidationError,
    load_validated, save_validated,
)

logger = logging.getLogger("dreamweaver.analysis")

FALLBACK_KEY_ENV = "API_KEY"
NOT_PROVIDED = "None provided"

SYSTEM_INSTRUCTION = """
You are an expert dream analyst and Jungian psychologist.
Your task is to take a user's dream description and break it down into "fragments" (key scenes or thought units).
For each fragment, you must analyze:
1. Characters involved.
2. Locations.
3. Emotions felt.
4. Colors: If explicitly mentioned, use them. If not, INFER the color based on the emotion (e.g., Fear -> Red/Black, Sadness -> Blue, Joy -> Yellow, Confusion -> Purple, Peace -> Green).
5. Actions taken.
6. Energy Score: An integer from 0 (low energy/passive) to 100 (high energy/intense).
7. Interpretation: A concise 1-sentence psychoanalytic interpretation of this specific fragment.

IMPORTANT: All text output (interpretation, characters, emotions, locations, etc.) MUST be in Traditional Chinese (繁體中文).

Return the response strictly as a JSON object.
"""

_STRING_LIST = {"type": "ARRAY", "items": {"type": "STRING"}}

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "fragments": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "text": {
                        "type": "STRING",
                        "description": "The original text of this fragment in Traditional Chinese",
                    },
                    "characters": _STRING_LIST,
                    "locations": _STRING_LIST,
                    "emotions": _STRING_LIST,
                    "colors": _STRING_LIST,
                    "actions": _STRING_LIST,
                    "energy_score": {"type": "INTEGER", "description": "0 to 100"},
                    "interpretation": {
                        "type": "STRING",
                        "description": "Interpretation in Traditional Chinese",
                    },
                },
                "required": [
                    "text", "characters", "locations", "emotions",
                    "colors", "actions", "energy_score", "interpretation",
                ],
            },
        },
    },
}


def load_config() -> AnalysisConfig:
    """Analysis settings from the data dir (defaults if missing or corrupt)."""
    return load_validated(get_paths().config_file, AnalysisConfig)


def update_config(**changes) -> AnalysisConfig:
    """Apply non-None changes to the saved analysis settings and persist them."""
    current = load_config()
    updates = {k: v for k, v in changes.items() if v is not None}
    try:
        config = AnalysisConfig.model_validate({**current.model_dump(), **updates})
    except ValidationError as e:
        raise DreamweaverValidationError(f"Invalid analysis config: {e.error_count()} field error(s)") from e
    save_validated(get_paths().config_file, config)
    logger.info("Analysis config updated: %s", ", ".join(sorted(updates)) or "no changes")
    return config


def _api_key(config: AnalysisConfig) -> Optional[str]:
    return os.environ.get(config.api_key_env) or os.environ.get(FALLBACK_KEY_ENV)


def _api_call(
    config: AnalysisConfig,
    api_key: str,
    payload: dict,
) -> dict:
    """Raw HTTP call to generateContent. Returns parsed JSON or raises AnalysisError."""
    url = f"{config.api_url.rstrip('/')}/models/{config.model}:generateContent"
    data = json.dumps(payload).encode("utf-8")

    req = urllib.request.Request(
        url,
        data=data,
        headers={
            "Content-Type": "application/json",
            "x-goog-api-key": api_key,
        },
        method="POST",
    )

    try:
        with urllib.request.urlopen(req, timeout=config.timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        raise AnalysisError(f"Gemini API returned HTTP {e.code}") from e
    except (urllib.error.URLError, TimeoutError, OSError) as e:
        raise AnalysisError(f"Gemini API unreachable: {e}") from e
    except json.JSONDecodeError as e:
        raise AnalysisError("Gemini API returned a non-JSON body") from e


def build_prompt(
    dream_text: str,
    context: Optional[str] = None,
    reentry_record: Optional[str] = None,
) -> str:
    return (
        f"Context/Recent Life Events: {context or NOT_PROVIDED}\n\n"
        f"Spiritual Re-entry/Active Imagination Record (Context only): "
        f"{reentry_record or NOT_PROVIDED}\n\n"
        f"Dream Description:\n{dream_text}\n"
    )


def build_payload(prompt: str, config: AnalysisConfig) -> dict:
    generation_config: Dict[str, Any] = {
        "responseMimeType": "application/json",
        "responseSchema": RESPONSE_SCHEMA,
    }
    if config.temperature is not None:
        generation_config["temperature"] = config.temperature

    return {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": generation_config,
    }


def _response_text(result: dict) -> Optional[str]:
    """Concatenate the text parts of the first candidate, if any."""
    if not isinstance(result, dict):
        return None
    candidates = result.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(p.get("text", "") for p in parts)
    return text or None


def parse_fragments(json_text: str) -> List[DreamFragment]:
    """
    Turn the model's JSON reply into fragments, each with a new uuid.

    Raises AnalysisError if the payload doesn't have the expected shape.
    """
    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise AnalysisError("Analysis response is not valid JSON") from e

    raw = parsed.get("fragments") if isinstance(parsed, dict) else None
    if not isinstance(raw, list):
        raise AnalysisError("Analysis response has no fragments list")

    try:
        return [
            DreamFragment.model_validate({**item, "id": str(uuid.uuid4())})
            for item in raw
        ]
    except (TypeError, ValidationError) as e:
        raise AnalysisError(f"Analysis response has malformed fragments: {e}") from e


def analyze_dream_text(
    dream_text: str,
    context: Optional[str] = None,
    reentry_record: Optional[str] = None,
    config: Optional[AnalysisConfig] = None,
) -> List[DreamFragment]:
    """
    Break a dream into analyzed fragments.

    Raises AnalysisError on a missing key, transport failure, empty reply,
    or unparsable payload. Nothing is retried.
    """
    config = config or load_config()
    api_key = _api_key(config)
    if not api_key:
        raise AnalysisError(
            f"No API key configured (set {config.api_key_env} or {FALLBACK_KEY_ENV})"
        )

    payload = build_payload(build_prompt(dream_text, context, reentry_record), config)

    try:
        result = _api_call(config, api_key, payload)
        json_text = _response_text(result)
        if not json_text:
            raise AnalysisError("No response from AI")
        fragments = parse_fragments(json_text)
    except AnalysisError as e:
        logger.error("Dream analysis error: %s", e)
        raise

    logger.info("Dream analyzed into %d fragments (model=%s)", len(fragments), config.model)
    return fragments


def status(config: Optional[AnalysisConfig] = None) -> Dict[str, Any]:
    """Get analysis client config info (never reveals the key)."""
    config = config or load_config()
    return {
        "model": config.model,
        "api_url": config.api_url,
        "timeout": config.timeout,
        "api_key_env": config.api_key_env,
        "api_key_configured": bool(_api_key(config)),
    }
