"""
Remote Speech Backend Base Class.

The playground never synthesizes audio itself. It forwards requests to a
remote text-to-speech service through a SpeechBackend, which exposes
exactly two calls:

    list_voices()          -> iterable of voice records
    synthesize(request)    -> audio bytes

Voice records are mappings (or objects) with name, language_codes,
ssml_gender and natural_sample_rate_hertz; see voices/directory.py.

Implementing a Backend:
    class MyBackend(SpeechBackend):
        name = "mine"

        def list_voices(self):
            return [{"name": "xx-XX-Standard-A", "language_codes": ["xx-XX"]}]

        def synthesize(self, request):
            return my_api.speak(**request.to_dict())
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional


@dataclass(frozen=True)
class RemoteSynthesisRequest:
    """
    The request actually forwarded to the remote service.

    Built by SynthesisService after validation and tier downgrades, so
    it only carries features the selected voice accepts.

    Attributes:
        text: Raw input (plain text or SSML markup).
        input_type: "text" or "ssml".
        voice_name: Remote voice identifier.
        language_code: Resolved language tag (override or voice default).
        audio_encoding: MP3, OGG_OPUS, LINEAR16 or MULAW.
        speaking_rate / pitch / volume_gain_db: Prosody, None when absent.
    """
    text: str
    input_type: str
    voice_name: str
    language_code: Optional[str]
    audio_encoding: str
    speaking_rate: Optional[float] = None
    pitch: Optional[float] = None
    volume_gain_db: Optional[float] = None

    def audio_config(self) -> Dict[str, Any]:
        """Audio configuration with only the prosody fields that are set."""
        config: Dict[str, Any] = {"audio_encoding": self.audio_encoding}
        if self.speaking_rate is not None:
            config["speaking_rate"] = self.speaking_rate
        if self.pitch is not None:
            config["pitch"] = self.pitch
        if self.volume_gain_db is not None:
            config["volume_gain_db"] = self.volume_gain_db
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Request in the shape of the Google synthesize call."""
        voice: Dict[str, Any] = {"name": self.voice_name}
        if self.language_code:
            voice["language_code"] = self.language_code
        return {
            "input": {"ssml": self.text} if self.input_type == "ssml" else {"text": self.text},
            "voice": voice,
            "audio_config": self.audio_config(),
        }


class SpeechBackend:
    """
    Abstract base class for remote text-to-speech services.

    Subclasses implement list_voices() and synthesize(). Any exception
    they raise is treated as a remote failure by the caller.
    """
    name: str = "base"

    def list_voices(self) -> Iterable[Any]:
        """
        List the voices offered by the remote service.

        Raises:
            NotImplementedError: If not overridden.
        """
        raise NotImplementedError

    def synthesize(self, request: RemoteSynthesisRequest) -> bytes:
        """
        Synthesize speech and return the encoded audio bytes.

        Raises:
            NotImplementedError: If not overridden.
        """
        raise NotImplementedError
