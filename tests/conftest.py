"""
Shared fixtures: a fake remote backend, a fake clock and an isolated
environment. Nothing in the test suite talks to Google.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from tts_playground.remote.backend import RemoteSynthesisRequest, SpeechBackend

VOICE_RECORDS: List[Dict[str, Any]] = [
    {"name": "en-US-Standard-A", "language_codes": ["en-US"], "ssml_gender": "FEMALE",
     "natural_sample_rate_hertz": 24000},
    {"name": "en-US-Neural2-C", "language_codes": ["en-US"], "ssml_gender": "FEMALE",
     "natural_sample_rate_hertz": 24000},
    {"name": "en-US-Chirp3-HD-Aoede", "language_codes": ["en-US"], "ssml_gender": "FEMALE",
     "natural_sample_rate_hertz": 24000},
    {"name": "en-GB-Wavenet-B", "language_codes": ["en-GB"], "ssml_gender": "MALE",
     "natural_sample_rate_hertz": 24000},
    {"name": "de-DE-Studio-B", "language_codes": ["de-DE"], "ssml_gender": "MALE",
     "natural_sample_rate_hertz": 24000},
    {"name": "en-US-Polyglot-1", "language_codes": ["en-US", "es-US"], "ssml_gender": "MALE",
     "natural_sample_rate_hertz": 24000},
    {"name": "en-US-Casual-K", "language_codes": ["en-US"], "ssml_gender": None,
     "natural_sample_rate_hertz": 0},
]

FAKE_AUDIO = b"ID3\x03\x00fake-mp3-bytes"

_ENV_VARS = (
    "HOST",
    "PORT",
    "CORS_ORIGIN",
    "VOICES_CACHE_TTL_SEC",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "TTS_PLAYGROUND_LOG_LEVEL",
    "TTS_PLAYGROUND_LOG_DIR",
)


class FakeBackend(SpeechBackend):
    """In-memory SpeechBackend with call counters and switchable failures."""
    name = "fake"

    def __init__(self, voices: Optional[List[Dict[str, Any]]] = None, audio: bytes = FAKE_AUDIO):
        self.voices = list(VOICE_RECORDS if voices is None else voices)
        self.audio = audio
        self.list_calls = 0
        self.synth_calls: List[RemoteSynthesisRequest] = []
        self.list_error: Optional[Exception] = None
        self.synth_error: Optional[Exception] = None

    def list_voices(self):
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.voices)

    def synthesize(self, request: RemoteSynthesisRequest) -> bytes:
        self.synth_calls.append(request)
        if self.synth_error is not None:
            raise self.synth_error
        return self.audio


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Point settings at a missing file, clear overrides, reset singletons."""
    from tts_playground.api.dependencies import get_settings
    from tts_playground.services.synthesis_service import reset_service

    monkeypatch.setenv("TTS_PLAYGROUND_SETTINGS", str(tmp_path / "missing-settings.yaml"))
    monkeypatch.setenv("TTS_PLAYGROUND_NO_COLOR", "1")
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    reset_service()
    yield
    get_settings.cache_clear()
    reset_service()


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def directory(fake_backend, fake_clock):
    from tts_playground.voices.directory import VoiceDirectory

    return VoiceDirectory(fetch=fake_backend.list_voices, ttl_seconds=3600, clock=fake_clock)


@pytest.fixture
def service(directory, fake_backend):
    from tts_playground.services.synthesis_service import SynthesisService

    return SynthesisService(directory, fake_backend)


@pytest.fixture
def client(service):
    """TestClient over a fresh app wired to the fake backend."""
    from fastapi.testclient import TestClient

    from tts_playground.main import create_app
    from tts_playground.services.synthesis_service import set_service

    set_service(service)
    with TestClient(create_app()) as c:
        yield c
