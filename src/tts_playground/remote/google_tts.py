"""
Google Cloud Text-to-Speech backend.

Authentication follows the usual Google client rules: if
google.credentials_path (GOOGLE_APPLICATION_CREDENTIALS) points to a
service-account JSON file it is loaded explicitly, otherwise the client
uses Application Default Credentials.

The client is created lazily on first use, so importing this module and
building the app never touches the network or the credential files.
"""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from google.cloud import texttospeech
from google.oauth2 import service_account

from tts_playground.core.config import Settings
from tts_playground.core.logging import debug, get_logger, verbose
from tts_playground.remote.backend import RemoteSynthesisRequest, SpeechBackend

_LOG = get_logger("tts-playground.google")


def _load_credentials(credentials_path: Optional[str]) -> Optional[service_account.Credentials]:
    if not credentials_path:
        return None
    resolved = Path(credentials_path).expanduser().resolve()
    return service_account.Credentials.from_service_account_file(str(resolved))


class GoogleSpeechBackend(SpeechBackend):
    """SpeechBackend backed by google-cloud-texttospeech."""
    name = "google"

    def __init__(self, credentials_path: Optional[str] = None, client: Any = None):
        """
        Args:
            credentials_path: Service-account JSON file, None for ADC.
            client: Pre-built TextToSpeechClient (tests, custom transports).
        """
        self._credentials_path = credentials_path
        self._client = client
        self._lock = threading.Lock()

    @property
    def client(self) -> texttospeech.TextToSpeechClient:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    credentials = _load_credentials(self._credentials_path)
                    self._client = texttospeech.TextToSpeechClient(credentials=credentials)
                    debug(_LOG, "client_created", adc=credentials is None)
        return self._client

    def list_voices(self) -> Iterable[Dict[str, Any]]:
        response = self.client.list_voices(request={})
        voices: List[Dict[str, Any]] = []
        for v in response.voices:
            voices.append({
                "name": v.name,
                "language_codes": list(v.language_codes),
                "ssml_gender": texttospeech.SsmlVoiceGender(v.ssml_gender).name,
                "natural_sample_rate_hertz": v.natural_sample_rate_hertz or None,
            })
        verbose(_LOG, "list_voices", count=len(voices))
        return voices

    def synthesize(self, request: RemoteSynthesisRequest) -> bytes:
        if request.input_type == "ssml":
            synthesis_input = texttospeech.SynthesisInput(ssml=request.text)
        else:
            synthesis_input = texttospeech.SynthesisInput(text=request.text)

        voice = texttospeech.VoiceSelectionParams(name=request.voice_name)
        if request.language_code:
            voice.language_code = request.language_code

        audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding[request.audio_encoding],
        )
        if request.speaking_rate is not None:
            audio_config.speaking_rate = request.speaking_rate
        if request.pitch is not None:
            audio_config.pitch = request.pitch
        if request.volume_gain_db is not None:
            audio_config.volume_gain_db = request.volume_gain_db

        response = self.client.synthesize_speech(
            input=synthesis_input,
            voice=voice,
            audio_config=audio_config,
        )
        return bytes(response.audio_content or b"")


def get_backend(settings: Settings) -> SpeechBackend:
    """Create the remote backend configured by settings."""
    return GoogleSpeechBackend(credentials_path=settings.credentials_path)
