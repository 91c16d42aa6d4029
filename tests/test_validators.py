"""
Tests for synthesis request validation.

Tests cover:
- Each rule in isolation (input type, text, voice, encoding, ranges)
- Range boundaries are inclusive
- validate_request() collects every failure into one InvalidRequestError
"""

import math

import pytest

from tts_playground.core.errors import ErrorCode, InvalidRequestError
from tts_playground.services.synthesis_service import SynthesizeRequest
from tts_playground.services.validators import (
    PITCH_RANGE,
    SPEAKING_RATE_RANGE,
    check_audio_encoding,
    check_input_type,
    check_range,
    check_text,
    check_voice_name,
    validate_request,
)


class TestRules:
    """Single-field checks."""

    def test_input_type(self):
        assert check_input_type("text") is None
        assert check_input_type("ssml") is None
        assert check_input_type("html").code == "INPUT_TYPE_INVALID"

    def test_text_required(self):
        assert check_text("").code == "TEXT_REQUIRED"
        assert check_text(None).code == "TEXT_REQUIRED"

    def test_whitespace_text_is_forwarded(self):
        assert check_text("   ") is None

    def test_text_length(self):
        assert check_text("a" * 4000) is None
        err = check_text("a" * 4001)
        assert err.code == "TEXT_TOO_LONG"
        assert err.field == "text"

    def test_voice_required(self):
        assert check_voice_name("en-US-Standard-A") is None
        assert check_voice_name("").code == "VOICE_REQUIRED"

    def test_audio_encoding(self):
        for enc in ("MP3", "OGG_OPUS", "LINEAR16", "MULAW"):
            assert check_audio_encoding(enc) is None
        assert check_audio_encoding("WAV").code == "AUDIO_ENCODING_INVALID"

    @pytest.mark.parametrize("value", [0.25, 1.0, 4.0, None])
    def test_speaking_rate_accepted(self, value):
        assert check_range("speakingRate", value, SPEAKING_RATE_RANGE) is None

    @pytest.mark.parametrize("value", [0.2, 4.01, -1])
    def test_speaking_rate_rejected(self, value):
        assert check_range("speakingRate", value, SPEAKING_RATE_RANGE).code == "OUT_OF_RANGE"

    @pytest.mark.parametrize("value", ["1.0", True, math.nan])
    def test_non_numbers_rejected(self, value):
        assert check_range("pitch", value, PITCH_RANGE).code == "NOT_A_NUMBER"


class TestValidateRequest:
    """Full request validation."""

    def test_valid_request_returned_unchanged(self):
        request = SynthesizeRequest(text="Hello", voice_name="en-US-Standard-A", pitch=-20, volume_gain_db=16)
        assert validate_request(request) is request

    def test_all_failures_collected(self):
        request = SynthesizeRequest(
            text="",
            voice_name="",
            input_type="markdown",
            audio_encoding="FLAC",
            speaking_rate=9,
            pitch=21,
            volume_gain_db=-97,
        )
        with pytest.raises(InvalidRequestError) as exc_info:
            validate_request(request)

        err = exc_info.value
        assert err.code == ErrorCode.INVALID_REQUEST
        assert err.status_code == 400
        fields = {d["field"] for d in err.details}
        assert fields == {"text", "voiceName", "inputType", "audioEncoding", "speakingRate", "pitch", "volumeGainDb"}

    def test_custom_max_length(self):
        request = SynthesizeRequest(text="abcdef", voice_name="v")
        with pytest.raises(InvalidRequestError):
            validate_request(request, max_text_chars=5)
