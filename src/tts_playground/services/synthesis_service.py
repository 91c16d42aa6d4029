"""
SynthesisService - the synthesis request handler.

Architecture:
    Request -> Validate -> Voice lookup -> Tier downgrades -> Remote call
            -> Empty-audio guard -> Metrics + cost -> Result

Key Components:
    - VoiceDirectory: cached voice list, used for lookup and tier
    - SpeechBackend: remote synthesis call
    - Pricing: cost estimate from tier and raw character count

Tier Downgrades:
    Some voice families reject features outright (Chirp 3: HD rejects
    SSML, speakingRate and pitch). Instead of letting the remote call
    fail, the handler drops the offending feature, keeps going, and adds
    one warning per downgrade to the result. The console uses the same
    table (voices/tiers.py) to disable the controls up front.

Error Handling:
    - InvalidRequestError: validation failed (400)
    - UnknownVoiceError: voice not in directory (400)
    - RemoteUnavailableError: voice listing failed (500)
    - RemoteError: remote synthesis failed or returned no audio (500)

Example:
    >>> service = SynthesisService(directory, backend)
    >>> result = service.synthesize(SynthesizeRequest(
    ...     text="Hello", voice_name="en-US-Standard-A"))
    >>> result.mime_type
    'audio/mpeg'
"""
from __future__ import annotations

import base64
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from tts_playground.core.config import Defaults, PlaygroundConfig, Settings
from tts_playground.core.errors import (
    ErrorCode,
    PlaygroundError,
    RemoteError,
    UnknownVoiceError,
)
from tts_playground.core.logging import error, get_logger, info, success, verbose, warn
from tts_playground.core.metrics import metrics
from tts_playground.remote.backend import RemoteSynthesisRequest, SpeechBackend
from tts_playground.services.validators import validate_request
from tts_playground.utils.timeit import timeit
from tts_playground.voices.directory import Voice, VoiceDirectory
from tts_playground.voices.pricing import CURRENCY, estimate_cost, rate_for
from tts_playground.voices.tiers import Feature, restricted_features, tier_label

_LOG = get_logger("tts-playground.service")

# Fixed encoding -> MIME mapping. LINEAR16 comes back with a WAV header.
MIME_TYPES: Dict[str, str] = {
    "MP3": "audio/mpeg",
    "OGG_OPUS": "audio/ogg",
    "LINEAR16": "audio/wav",
    "MULAW": "audio/basic",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def mime_type_for(encoding: str) -> str:
    return MIME_TYPES.get(encoding, DEFAULT_MIME_TYPE)


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# Request/Response Dataclasses
# =============================================================================

@dataclass
class SynthesizeRequest:
    """
    Request for speech synthesis.

    Attributes:
        text: Raw input, plain text or SSML (required).
        voice_name: Voice identifier from the directory (required).
        input_type: "text" or "ssml".
        language_code: Override for the voice's default language.
        audio_encoding: MP3, OGG_OPUS, LINEAR16 or MULAW.
        speaking_rate / pitch / volume_gain_db: Optional prosody.
    """
    text: str
    voice_name: str
    input_type: str = "text"
    language_code: Optional[str] = None
    audio_encoding: str = Defaults.SYNTHESIS_DEFAULT_ENCODING
    speaking_rate: Optional[float] = None
    pitch: Optional[float] = None
    volume_gain_db: Optional[float] = None


@dataclass
class SynthesisResult:
    """
    Result of one synthesis call.

    Attributes:
        audio: Encoded audio bytes returned by the remote service.
        mime_type: Browser MIME type for the encoding.
        encoding: Requested audio encoding.
        voice: The directory entry that was used.
        tts_ms: Remote call duration, whole milliseconds.
        total_ms: Whole handler duration, whole milliseconds.
        started_at_iso: Handler start time (UTC).
        char_count: Billed characters (raw input, markup included).
        input_type: Effective input type after downgrades.
        estimated_cost_usd: Cost estimate for char_count at the voice's tier.
        per_1m_characters_usd: Tier rate used for the estimate.
        warnings: One message per downgrade applied.
    """
    audio: bytes
    mime_type: str
    encoding: str
    voice: Voice
    tts_ms: int
    total_ms: int
    started_at_iso: str
    char_count: int
    input_type: str
    estimated_cost_usd: float
    per_1m_characters_usd: float
    warnings: List[str] = field(default_factory=list)

    @property
    def audio_base64(self) -> str:
        return base64.b64encode(self.audio).decode("ascii")

    def to_dict(self) -> Dict[str, Any]:
        """Response body for POST /synthesize."""
        return {
            "audio": {
                "base64": self.audio_base64,
                "mimeType": self.mime_type,
                "encoding": self.encoding,
            },
            "voice": {
                "name": self.voice.name,
                "voiceType": self.voice.voice_type.value,
                "ssmlGender": self.voice.ssml_gender,
                "languageCodes": list(self.voice.language_codes),
                "naturalSampleRateHertz": self.voice.natural_sample_rate_hertz,
            },
            "metrics": {
                "server": {
                    "ttsMs": self.tts_ms,
                    "totalMs": self.total_ms,
                    "startedAtIso": self.started_at_iso,
                },
                "input": {
                    "charCount": self.char_count,
                    "inputType": self.input_type,
                },
                "billingEstimate": {
                    "currency": CURRENCY,
                    "estimatedCostUsd": self.estimated_cost_usd,
                    "per1MCharactersUsd": self.per_1m_characters_usd,
                },
            },
            "warnings": list(self.warnings),
        }


# =============================================================================
# Tier downgrades
# =============================================================================

def apply_tier_restrictions(request: SynthesizeRequest, voice: Voice) -> tuple[SynthesizeRequest, List[str]]:
    """
    Drop request features the voice's tier rejects.

    Returns:
        (possibly downgraded copy of the request, warnings). The input
        request is not modified. volume_gain_db is never touched.
    """
    restricted = restricted_features(voice.voice_type)
    if not restricted:
        return request, []

    label = tier_label(voice.voice_type)
    warnings: List[str] = []
    changes: Dict[str, Any] = {}

    if Feature.SSML in restricted and request.input_type == "ssml":
        warnings.append(f"{label} voices do not support SSML. Falling back to plain text.")
        changes["input_type"] = "text"
    if Feature.SPEAKING_RATE in restricted and request.speaking_rate is not None:
        warnings.append(f"{label} voices do not support speakingRate. Ignoring.")
        changes["speaking_rate"] = None
    if Feature.PITCH in restricted and request.pitch is not None:
        warnings.append(f"{label} voices do not support pitch. Ignoring.")
        changes["pitch"] = None

    if not changes:
        return request, []
    return replace(request, **changes), warnings


# =============================================================================
# Main Service Class
# =============================================================================

class SynthesisService:
    """
    Validates synthesis requests, applies tier downgrades, calls the
    remote backend and shapes the result.

    The service holds no per-request state; one instance serves every
    request (see api/dependencies.py).
    """

    def __init__(
        self,
        directory: VoiceDirectory,
        backend: SpeechBackend,
        config: Optional[PlaygroundConfig] = None,
    ):
        self._directory = directory
        self._backend = backend
        self._config = config or PlaygroundConfig()
        self._max_text_chars = self._config.synthesis.max_text_chars
        self._default_encoding = self._config.synthesis.default_encoding
        self._text_preview_chars = self._config.logging.text_preview_chars

    @property
    def directory(self) -> VoiceDirectory:
        return self._directory

    @property
    def backend(self) -> SpeechBackend:
        return self._backend

    @property
    def default_encoding(self) -> str:
        """Encoding used when a request does not name one."""
        return self._default_encoding

    def build_remote_request(self, request: SynthesizeRequest, voice: Voice) -> RemoteSynthesisRequest:
        """Remote request for an already-downgraded SynthesizeRequest."""
        return RemoteSynthesisRequest(
            text=request.text,
            input_type=request.input_type,
            voice_name=request.voice_name,
            language_code=request.language_code or voice.primary_language,
            audio_encoding=request.audio_encoding,
            speaking_rate=request.speaking_rate,
            pitch=request.pitch,
            volume_gain_db=request.volume_gain_db,
        )

    def synthesize(self, request: SynthesizeRequest) -> SynthesisResult:
        """
        Synthesize one request.

        Args:
            request: Synthesis parameters.

        Returns:
            SynthesisResult with audio, timing, cost and warnings.

        Raises:
            InvalidRequestError: If validation fails.
            UnknownVoiceError: If voice_name is not in the directory.
            RemoteUnavailableError: If the voice list could not be fetched.
            RemoteError: If the remote call fails or returns no audio.
        """
        started_at_iso = _iso_now()
        voice_type = "unknown"
        tts_seconds: Optional[float] = None

        with timeit("synthesize_total") as total:
            try:
                validate_request(request, self._max_text_chars)

                voice = self._directory.find(request.voice_name)
                if voice is None:
                    raise UnknownVoiceError(request.voice_name)
                voice_type = voice.voice_type.value

                effective, warnings = apply_tier_restrictions(request, voice)
                for w in warnings:
                    verbose(_LOG, "downgraded", voice_type=voice_type, warning=w)

                char_count = len(request.text)
                remote_request = self.build_remote_request(effective, voice)

                info(
                    _LOG,
                    "synthesize_start",
                    voice=voice.name,
                    voice_type=voice_type,
                    encoding=effective.audio_encoding,
                    input_type=effective.input_type,
                    chars=char_count,
                    preview=request.text[: self._text_preview_chars],
                )

                with timeit("remote_synthesize") as remote:
                    try:
                        audio = self._backend.synthesize(remote_request)
                    except Exception as e:
                        tts_seconds = remote.elapsed()
                        raise RemoteError(
                            "Synthesis request failed",
                            details=str(e) or type(e).__name__,
                        ) from e
                tts_seconds = remote.timing.seconds

                if not audio:
                    raise RemoteError("No audioContent returned by Google TTS.")

                cost = estimate_cost(voice.voice_type, char_count)
                rate = rate_for(voice.voice_type)

            except PlaygroundError as e:
                metrics.record_synthesis(voice_type, e.code, remote_seconds=tts_seconds)
                if e.status_code >= 500:
                    error(_LOG, "synthesize_failed", code=e.code, message=e.message, details=e.details)
                else:
                    warn(_LOG, "synthesize_rejected", code=e.code, details=e.details)
                raise

        result = SynthesisResult(
            audio=audio,
            mime_type=mime_type_for(effective.audio_encoding),
            encoding=effective.audio_encoding,
            voice=voice,
            tts_ms=int(round(tts_seconds * 1000)),
            total_ms=total.timing.ms,
            started_at_iso=started_at_iso,
            char_count=char_count,
            input_type=effective.input_type,
            estimated_cost_usd=cost,
            per_1m_characters_usd=rate,
            warnings=warnings,
        )
        metrics.record_synthesis(
            voice_type,
            "success",
            remote_seconds=tts_seconds,
            characters=char_count,
            cost_usd=cost,
        )
        success(
            _LOG,
            "synthesize_done",
            voice=voice.name,
            bytes=len(audio),
            tts_ms=result.tts_ms,
            cost_usd=cost,
            seconds=round(total.timing.seconds, 3),
        )
        return result


# =============================================================================
# Singleton
# =============================================================================

_SERVICE: Optional[SynthesisService] = None
_SERVICE_LOCK = threading.Lock()


def build_service(settings: Settings, backend: Optional[SpeechBackend] = None) -> SynthesisService:
    """Wire a SynthesisService (directory + backend) from settings."""
    from tts_playground.remote.google_tts import get_backend

    config = settings.get_config()
    backend = backend or get_backend(settings)
    directory = VoiceDirectory(fetch=backend.list_voices, ttl_seconds=config.voices.cache_ttl_seconds)
    return SynthesisService(directory, backend, config)


def get_service(settings: Settings) -> SynthesisService:
    """Get or create the process-wide SynthesisService."""
    global _SERVICE
    if _SERVICE is None:
        with _SERVICE_LOCK:
            if _SERVICE is None:
                _SERVICE = build_service(settings)
    return _SERVICE


def set_service(service: Optional[SynthesisService]) -> None:
    """Replace the process-wide service (tests and embedding)."""
    global _SERVICE
    with _SERVICE_LOCK:
        _SERVICE = service


def reset_service() -> None:
    set_service(None)


__all__ = [
    "ErrorCode",
    "MIME_TYPES",
    "SynthesizeRequest",
    "SynthesisResult",
    "SynthesisService",
    "apply_tier_restrictions",
    "build_service",
    "get_service",
    "mime_type_for",
    "reset_service",
    "set_service",
]
