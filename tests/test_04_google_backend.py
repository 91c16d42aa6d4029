"""
Tests for the Google Cloud Text-to-Speech backend with a mocked client.

Tests cover:
- list_voices() maps proto records to plain dicts
- synthesize() builds text/SSML input, voice and audio config
- Only prosody fields that are set are sent
- Credentials file vs Application Default Credentials
"""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from google.cloud import texttospeech

from tts_playground.core.config import Settings
from tts_playground.remote.backend import RemoteSynthesisRequest
from tts_playground.remote.google_tts import GoogleSpeechBackend, get_backend


def _request(**overrides):
    fields = dict(
        text="Hello",
        input_type="text",
        voice_name="en-US-Neural2-C",
        language_code="en-US",
        audio_encoding="MP3",
    )
    fields.update(overrides)
    return RemoteSynthesisRequest(**fields)


class TestListVoices:
    """Voice listing."""

    def test_maps_records(self):
        client = MagicMock()
        client.list_voices.return_value = SimpleNamespace(voices=[
            SimpleNamespace(
                name="en-US-Neural2-C",
                language_codes=["en-US"],
                ssml_gender=texttospeech.SsmlVoiceGender.FEMALE,
                natural_sample_rate_hertz=24000,
            ),
            SimpleNamespace(
                name="en-US-Casual-K",
                language_codes=["en-US"],
                ssml_gender=0,
                natural_sample_rate_hertz=0,
            ),
        ])

        voices = GoogleSpeechBackend(client=client).list_voices()

        assert voices[0] == {
            "name": "en-US-Neural2-C",
            "language_codes": ["en-US"],
            "ssml_gender": "FEMALE",
            "natural_sample_rate_hertz": 24000,
        }
        assert voices[1]["ssml_gender"] == "SSML_VOICE_GENDER_UNSPECIFIED"
        assert voices[1]["natural_sample_rate_hertz"] is None


class TestSynthesize:
    """synthesize_speech call shape."""

    def _backend(self, audio=b"mp3"):
        client = MagicMock()
        client.synthesize_speech.return_value = SimpleNamespace(audio_content=audio)
        return GoogleSpeechBackend(client=client), client

    def test_text_input(self):
        backend, client = self._backend()
        assert backend.synthesize(_request()) == b"mp3"

        kwargs = client.synthesize_speech.call_args.kwargs
        assert kwargs["input"].text == "Hello"
        assert kwargs["voice"].name == "en-US-Neural2-C"
        assert kwargs["voice"].language_code == "en-US"
        assert kwargs["audio_config"].audio_encoding == texttospeech.AudioEncoding.MP3
        assert kwargs["audio_config"].speaking_rate == 0

    def test_ssml_input_and_prosody(self):
        backend, client = self._backend()
        backend.synthesize(_request(
            text="<speak>Hi</speak>", input_type="ssml", audio_encoding="OGG_OPUS",
            speaking_rate=1.5, pitch=-2.0, volume_gain_db=3.0,
        ))

        kwargs = client.synthesize_speech.call_args.kwargs
        assert kwargs["input"].ssml == "<speak>Hi</speak>"
        assert kwargs["input"].text == ""
        config = kwargs["audio_config"]
        assert config.audio_encoding == texttospeech.AudioEncoding.OGG_OPUS
        assert config.speaking_rate == 1.5
        assert config.pitch == -2.0
        assert config.volume_gain_db == 3.0

    def test_empty_audio_returns_empty_bytes(self):
        backend, _ = self._backend(audio=b"")
        assert backend.synthesize(_request()) == b""


class TestCredentials:
    """Client construction."""

    def test_adc_when_no_path(self):
        with patch("tts_playground.remote.google_tts.texttospeech.TextToSpeechClient") as ctor:
            backend = GoogleSpeechBackend()
            assert backend.client is ctor.return_value
            assert backend.client is ctor.return_value
        ctor.assert_called_once_with(credentials=None)

    def test_service_account_file(self, tmp_path):
        key = tmp_path / "sa.json"
        with patch("tts_playground.remote.google_tts.service_account.Credentials.from_service_account_file") as load, \
                patch("tts_playground.remote.google_tts.texttospeech.TextToSpeechClient") as ctor:
            GoogleSpeechBackend(credentials_path=str(key)).client
        load.assert_called_once_with(str(key.resolve()))
        ctor.assert_called_once_with(credentials=load.return_value)

    def test_get_backend_uses_settings(self):
        backend = get_backend(Settings(raw={"google": {"credentials_path": "/keys/sa.json"}}))
        assert isinstance(backend, GoogleSpeechBackend)
        assert backend._credentials_path == "/keys/sa.json"

    def test_remote_request_dict(self):
        assert _request(pitch=1.0).to_dict() == {
            "input": {"text": "Hello"},
            "voice": {"name": "en-US-Neural2-C", "language_code": "en-US"},
            "audio_config": {"audio_encoding": "MP3", "pitch": 1.0},
        }
