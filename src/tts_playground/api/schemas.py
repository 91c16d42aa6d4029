"""
API Request/Response Schemas.

Pydantic models for the HTTP API. Field names on the wire are camelCase
(what the browser console sends); Python attributes are snake_case.

Models:
    SynthesizeBody: Input schema for POST /synthesize
    HealthResponse: Output schema for GET /health

Example Request:
    {
        "inputType": "text",
        "text": "Hello! This is a quick test of Google Text-to-Speech.",
        "voiceName": "en-US-Neural2-C",
        "languageCode": "en-US",
        "audioEncoding": "MP3",
        "speakingRate": 1.0,
        "pitch": 0
    }
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from tts_playground.core.config import Defaults
from tts_playground.services.synthesis_service import SynthesizeRequest
from tts_playground.services.validators import (
    PITCH_RANGE,
    SPEAKING_RATE_RANGE,
    VOLUME_GAIN_DB_RANGE,
)


class SynthesizeBody(BaseModel):
    """
    Synthesis request body.

    Attributes:
        input_type: "text" (default) or "ssml".
        text: Input to synthesize, non-empty. The length limit
            (synthesis.max_text_chars) is enforced by SynthesisService;
            SSML tags count toward it and toward the billed characters.
        voice_name: Voice name from GET /voices.
        language_code: Optional override; the voice's first language
            is used when omitted.
        audio_encoding: MP3, OGG_OPUS, LINEAR16 or MULAW. Omitted means
            synthesis.default_encoding.
        speaking_rate: 0.25-4.0. Dropped for voices that reject it.
        pitch: -20..20 semitones. Dropped for voices that reject it.
        volume_gain_db: -96..16 dB.
    """
    model_config = ConfigDict(populate_by_name=True)

    input_type: Literal["text", "ssml"] = Field(default="text", alias="inputType")
    text: str = Field(
        ...,
        min_length=1,
        description="Text or SSML to synthesize",
    )
    voice_name: str = Field(..., min_length=1, alias="voiceName")
    language_code: Optional[str] = Field(default=None, alias="languageCode")
    audio_encoding: Optional[Literal["MP3", "OGG_OPUS", "LINEAR16", "MULAW"]] = Field(
        default=None,
        alias="audioEncoding",
    )
    speaking_rate: Optional[float] = Field(
        default=None,
        ge=SPEAKING_RATE_RANGE[0],
        le=SPEAKING_RATE_RANGE[1],
        alias="speakingRate",
    )
    pitch: Optional[float] = Field(default=None, ge=PITCH_RANGE[0], le=PITCH_RANGE[1])
    volume_gain_db: Optional[float] = Field(
        default=None,
        ge=VOLUME_GAIN_DB_RANGE[0],
        le=VOLUME_GAIN_DB_RANGE[1],
        alias="volumeGainDb",
    )

    def to_request(self, default_encoding: str = Defaults.SYNTHESIS_DEFAULT_ENCODING) -> SynthesizeRequest:
        return SynthesizeRequest(
            text=self.text,
            voice_name=self.voice_name,
            input_type=self.input_type,
            language_code=self.language_code or None,
            audio_encoding=self.audio_encoding or default_encoding,
            speaking_rate=self.speaking_rate,
            pitch=self.pitch,
            volume_gain_db=self.volume_gain_db,
        )


class HealthResponse(BaseModel):
    ok: bool = Field(..., description="Always true while the process serves requests")
    time: str = Field(..., description="Server time, ISO-8601")
