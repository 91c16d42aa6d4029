"""
FastAPI Dependency Injection Providers.

Architecture:
    get_settings()           - loads and caches configuration
    get_synthesis_service()  - process-wide SynthesisService
    get_voice_directory()    - the service's shared VoiceDirectory

The voice directory must be shared by every request, otherwise each
request would refetch the voice list. Tests replace the service with
set_service() (or app.dependency_overrides) to inject a fake backend.
"""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from tts_playground.core.config import Settings, load_settings
from tts_playground.services.synthesis_service import SynthesisService, get_service
from tts_playground.voices.directory import VoiceDirectory


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache application settings.

    The settings file path comes from TTS_PLAYGROUND_SETTINGS
    (default config/settings.yaml); a missing file means defaults.
    """
    return load_settings()


def get_synthesis_service() -> SynthesisService:
    return get_service(get_settings())


def get_voice_directory(service: SynthesisService = Depends(get_synthesis_service)) -> VoiceDirectory:
    return service.directory
