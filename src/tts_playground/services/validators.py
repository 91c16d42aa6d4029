"""
Input Validation for Synthesis Requests.

Validation happens before the voice lookup and before any remote call.
The API layer checks types and ranges with pydantic. The text length
limit is configurable (synthesis.max_text_chars), so only these checks
enforce it, for HTTP callers and direct ones (the CLI, tests) alike.

Validation Rules:
    - inputType: "text" or "ssml" (default "text")
    - text: required, non-empty, at most synthesis.max_text_chars (4000)
    - voiceName: required
    - audioEncoding: MP3, OGG_OPUS, LINEAR16 or MULAW (default MP3)
    - speakingRate: 0.25 .. 4.0
    - pitch: -20 .. 20
    - volumeGainDb: -96 .. 16

Error Handling:
    Each failed rule produces a FieldError; validate_request() collects
    all of them and raises one InvalidRequestError whose details list
    every offending field.

Usage:
    from tts_playground.services.validators import validate_request

    request = validate_request(request)   # raises InvalidRequestError
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from tts_playground.core.config import Defaults
from tts_playground.core.errors import InvalidRequestError

INPUT_TYPES = ("text", "ssml")
AUDIO_ENCODINGS = Defaults.SYNTHESIS_ENCODINGS

SPEAKING_RATE_RANGE: Tuple[float, float] = (0.25, 4.0)
PITCH_RANGE: Tuple[float, float] = (-20.0, 20.0)
VOLUME_GAIN_DB_RANGE: Tuple[float, float] = (-96.0, 16.0)


@dataclass(frozen=True)
class FieldError:
    """One failed validation rule."""
    field: str
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


def check_input_type(value: Optional[str]) -> Optional[FieldError]:
    if value not in INPUT_TYPES:
        return FieldError("inputType", "INPUT_TYPE_INVALID", f"inputType must be one of {list(INPUT_TYPES)}")
    return None


def check_text(text: Optional[str], max_length: int = Defaults.SYNTHESIS_MAX_TEXT_CHARS) -> Optional[FieldError]:
    if not text:
        return FieldError("text", "TEXT_REQUIRED", "text is required")
    if len(text) > max_length:
        return FieldError("text", "TEXT_TOO_LONG", f"text exceeds maximum length ({len(text)} > {max_length})")
    return None


def check_voice_name(voice_name: Optional[str]) -> Optional[FieldError]:
    if not voice_name:
        return FieldError("voiceName", "VOICE_REQUIRED", "voiceName is required")
    return None


def check_audio_encoding(value: Optional[str]) -> Optional[FieldError]:
    if value not in AUDIO_ENCODINGS:
        return FieldError(
            "audioEncoding",
            "AUDIO_ENCODING_INVALID",
            f"audioEncoding must be one of {list(AUDIO_ENCODINGS)}",
        )
    return None


def check_range(field: str, value: Any, bounds: Tuple[float, float]) -> Optional[FieldError]:
    """
    Check an optional numeric field against an inclusive range.

    None passes (the field is optional). Booleans, non-numbers and NaN
    are rejected.
    """
    if value is None:
        return None
    lo, hi = bounds
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return FieldError(field, "NOT_A_NUMBER", f"{field} must be a number")
    if not (lo <= value <= hi):
        return FieldError(field, "OUT_OF_RANGE", f"{field} must be between {lo} and {hi}, got {value}")
    return None


def collect_errors(request: Any, max_text_chars: int = Defaults.SYNTHESIS_MAX_TEXT_CHARS) -> List[FieldError]:
    """Run every rule against a SynthesizeRequest-like object."""
    checks = [
        check_input_type(request.input_type),
        check_text(request.text, max_text_chars),
        check_voice_name(request.voice_name),
        check_audio_encoding(request.audio_encoding),
        check_range("speakingRate", request.speaking_rate, SPEAKING_RATE_RANGE),
        check_range("pitch", request.pitch, PITCH_RANGE),
        check_range("volumeGainDb", request.volume_gain_db, VOLUME_GAIN_DB_RANGE),
    ]
    return [c for c in checks if c is not None]


def validate_request(request: Any, max_text_chars: int = Defaults.SYNTHESIS_MAX_TEXT_CHARS) -> Any:
    """
    Validate a synthesis request.

    Returns:
        The request unchanged.

    Raises:
        InvalidRequestError: With details listing every failed field.
    """
    errors = collect_errors(request, max_text_chars)
    if errors:
        raise InvalidRequestError("Bad request", details=[e.to_dict() for e in errors])
    return request
