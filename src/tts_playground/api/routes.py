"""
Playground API Routes.

Endpoints:
    GET  /health      - Liveness check with server time
    GET  /pricing     - Tier price table, disclaimer and tier restrictions
    GET  /voices      - Cached voice directory plus derived language/tier lists
    POST /synthesize  - Synthesize text with one voice, return base64 audio + metrics
    GET  /metrics     - Prometheus metrics

main.py mounts this router twice: at the root and under /api, which is
where the browser console calls it.

Error Handling:
    Errors are returned as JSON:
    {
        "ok": false,
        "error": "<human readable message>",
        "code": "<ERROR_CODE>",
        "details": <per-field list, remote message or null>
    }

    HTTP status comes from the exception class:
        - INVALID_REQUEST, UNKNOWN_VOICE -> 400
        - REMOTE_UNAVAILABLE, REMOTE_ERROR -> 500

Example Usage:
    >>> import httpx
    >>> r = httpx.post("http://127.0.0.1:7069/api/synthesize", json={
    ...     "text": "Hello", "voiceName": "en-US-Standard-A"})
    >>> r.json()["metrics"]["billingEstimate"]["estimatedCostUsd"]
    2e-05
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from tts_playground.api.dependencies import get_synthesis_service, get_voice_directory
from tts_playground.api.schemas import HealthResponse, SynthesizeBody
from tts_playground.core.errors import ErrorCode, PlaygroundError
from tts_playground.core.logging import error, get_logger, set_request_id
from tts_playground.core.metrics import metrics
from tts_playground.services.synthesis_service import SynthesisService
from tts_playground.voices.directory import VoiceDirectory
from tts_playground.voices.pricing import pricing_table

router = APIRouter()

_LOG = get_logger("tts-playground.api")


def _new_request_id() -> str:
    rid = str(uuid.uuid4())[:12]
    set_request_id(rid)
    return rid


def _error_response(err: PlaygroundError, rid: str) -> JSONResponse:
    return JSONResponse(
        status_code=err.status_code,
        content=err.to_dict(),
        headers={"X-Request-Id": rid},
    )


def _internal_error(rid: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "ok": False,
            "error": "Internal server error",
            "code": ErrorCode.INTERNAL_ERROR,
            "details": None,
            "request_id": rid,
        },
        headers={"X-Request-Id": rid},
    )


@router.get("/health", response_model=HealthResponse)
def health():
    """Liveness check. Does not touch the remote service."""
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}


@router.get("/pricing")
def pricing():
    """
    Pricing table in USD per one million characters.

    Also returns the tier restriction table, so the console can disable
    SSML and prosody controls for tiers that reject them.
    """
    return pricing_table()


@router.get("/voices")
def voices(directory: VoiceDirectory = Depends(get_voice_directory)):
    """
    List available voices.

    Returns:
        voices: Voice records (name, languageCodes, ssmlGender,
            naturalSampleRateHertz, voiceType)
        languages: Sorted distinct language tags
        voiceTypes: Sorted distinct pricing tiers
        cache: {ttlSec, cachedAt, count}

    Raises:
        500: The remote voice listing failed (stale data is not served).
    """
    rid = _new_request_id()
    try:
        voice_list = directory.get_voices()
        return {
            "voices": [v.to_dict() for v in voice_list],
            "languages": directory.languages(voice_list),
            "voiceTypes": directory.voice_types(voice_list),
            "cache": directory.cache_info(),
        }
    except PlaygroundError as e:
        return _error_response(e, rid)
    except Exception as e:
        error(_LOG, "voices_unexpected_error", exc_info=e, error=str(e))
        return _internal_error(rid)


@router.post("/synthesize")
def synthesize(
    body: SynthesizeBody,
    service: SynthesisService = Depends(get_synthesis_service),
):
    """
    Synthesize speech with one voice.

    Returns:
        audio: {base64, mimeType, encoding}
        voice: the directory entry used
        metrics: server timing (ttsMs, totalMs, startedAtIso), input
            (charCount, inputType) and billingEstimate
        warnings: one message per feature dropped for the voice's tier

    Raises:
        400: Invalid body or unknown voiceName
        500: Voice listing failed, remote synthesis failed or returned no audio

    Example:
        curl -X POST http://127.0.0.1:7069/api/synthesize \\
            -H "Content-Type: application/json" \\
            -d '{"text": "Hello", "voiceName": "en-US-Standard-A"}'
    """
    rid = _new_request_id()
    try:
        result = service.synthesize(body.to_request(service.default_encoding))
        return JSONResponse(content=result.to_dict(), headers={"X-Request-Id": rid})
    except PlaygroundError as e:
        return _error_response(e, rid)
    except Exception as e:
        # Log internally, don't expose details
        error(_LOG, "synthesize_unexpected_error", exc_info=e, error=str(e))
        return _internal_error(rid)


@router.get("/metrics")
def prometheus_metrics():
    """Prometheus text exposition of the service metrics."""
    content, content_type = metrics.get_metrics_response()
    return Response(content=content, media_type=content_type)
