"""
Tests for the Python console session.

Tests cover:
- Directory loaded once per session, default selections
- Voice filtering and restriction mirroring for Chirp 3: HD
- generate() against the real app (TestClient) with a fake backend
- History cap, most-recent-first order, replay without a request
- Server error text surfaced through ConsoleError
"""
import json

import httpx
import pytest

from tts_playground.console.session import (
    HISTORY_LIMIT,
    ConsoleError,
    ConsoleSession,
    format_usd,
)


@pytest.fixture
def session(client):
    """Console session talking to the TestClient app."""
    return ConsoleSession(client=client)


class TestFormatUsd:
    """Console cost formatting."""

    def test_values(self):
        assert format_usd(0) == "$0"
        assert format_usd(0.00002) == "$2.00e-05"
        assert format_usd(0.00016) == "$0.000160"
        assert format_usd(None) == "-"
        assert format_usd(float("nan")) == "-"


class TestLoad:
    """Directory and defaults."""

    def test_defaults_prefer_chirp_and_en_us(self, session):
        session.load()
        assert session.form.voice_type == "CHIRP_HD"
        assert session.form.language == "en-US"
        assert session.form.voice_name == "en-US-Chirp3-HD-Aoede"
        assert session.restrictions["CHIRP_HD"] == ["pitch", "speaking_rate", "ssml"]

    def test_loaded_once(self, session, fake_backend):
        session.load()
        session.load()
        session.form.text = "one"
        session.generate()
        assert fake_backend.list_calls == 1

    def test_filtered_voices_sorted(self, session):
        session.load()
        session.select(voice_type="POLYGLOT", language="es-US")
        assert [v["name"] for v in session.filtered_voices()] == ["en-US-Polyglot-1"]
        assert session.form.voice_name == "en-US-Polyglot-1"

    def test_unreachable_backend(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with ConsoleSession(client=httpx.Client(transport=httpx.MockTransport(refuse), base_url="http://x")) as s:
            with pytest.raises(ConsoleError, match="Backend not reachable"):
                s.load()


class TestRestrictions:
    """Restricted controls are cleared before submit."""

    def test_chirp_payload_omits_prosody_and_ssml(self, session):
        session.load()
        session.select(input_type="ssml", speaking_rate=2.0, pitch=5.0)
        payload = session.build_payload()
        assert payload["inputType"] == "text"
        assert "speakingRate" not in payload
        assert "pitch" not in payload
        assert session.form.speaking_rate == 1.0

    def test_neural2_payload_keeps_prosody(self, session):
        session.load()
        session.select(voice_type="NEURAL2")
        session.select(input_type="ssml", speaking_rate=1.25, pitch=-2.0, text="  <speak>Hi</speak>  ")
        payload = session.build_payload()
        assert payload == {
            "inputType": "ssml",
            "text": "<speak>Hi</speak>",
            "voiceName": "en-US-Neural2-C",
            "languageCode": "en-US",
            "audioEncoding": "MP3",
            "speakingRate": 1.25,
            "pitch": -2.0,
        }

    def test_unknown_form_field(self, session):
        with pytest.raises(AttributeError):
            session.select(colour="red")


class TestGenerateAndHistory:
    """Synthesis through the HTTP API."""

    def test_generate(self, session, fake_backend):
        session.load()
        session.select(voice_type="STANDARD", text="Hello")
        entry = session.generate()

        assert entry.audio == fake_backend.audio
        assert entry.mime_type == "audio/mpeg"
        assert entry.audio_src.startswith("data:audio/mpeg;base64,")
        assert entry.voice_name == "en-US-Standard-A"
        assert entry.estimated_cost_usd == (4 / 1_000_000) * 5
        assert session.current is entry
        assert session.history == [entry]

    def test_history_is_capped_and_most_recent_first(self, client):
        session = ConsoleSession(client=client, history_limit=3)
        session.load()
        entries = []
        for i in range(5):
            session.select(text=f"take {i}")
            entries.append(session.generate())

        assert [e.id for e in session.history] == [e.id for e in reversed(entries[-3:])]
        assert len(session.history) == 3

    def test_default_history_limit(self, session):
        assert HISTORY_LIMIT == 20
        session.load()
        for i in range(HISTORY_LIMIT + 2):
            session.select(text=f"take {i}")
            session.generate()
        assert len(session.history) == HISTORY_LIMIT

    def test_replay_makes_no_request(self, session, fake_backend):
        session.load()
        first = session.generate()
        session.select(text="second")
        session.generate()
        calls = len(fake_backend.synth_calls)

        assert session.replay(first.id) is first
        assert session.current is first
        assert len(fake_backend.synth_calls) == calls

    def test_replay_unknown_id(self, session):
        with pytest.raises(KeyError):
            session.replay("missing")

    def test_blank_text_not_sent(self, session, fake_backend):
        session.load()
        session.select(text="   ")
        with pytest.raises(ConsoleError):
            session.generate()
        assert fake_backend.synth_calls == []

    def test_server_error_details_surface(self, session, fake_backend):
        session.load()
        fake_backend.synth_error = RuntimeError("RESOURCE_EXHAUSTED: quota")
        with pytest.raises(ConsoleError, match="RESOURCE_EXHAUSTED: quota"):
            session.generate()
        assert session.history == []

    def test_structured_details_are_json(self):
        def handler(request):
            if request.url.path == "/api/voices":
                return httpx.Response(200, json={"voices": [
                    {"name": "gone-voice", "languageCodes": ["en-US"], "voiceType": "STANDARD"},
                ], "languages": ["en-US"], "voiceTypes": ["STANDARD"]})
            if request.url.path == "/api/pricing":
                return httpx.Response(200, json={"restrictions": {}})
            return httpx.Response(400, json={"error": "Unknown voiceName.", "details": {"voiceName": "gone-voice"}})

        http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://x")
        with ConsoleSession(client=http) as s:
            s.load()
            with pytest.raises(ConsoleError) as exc_info:
                s.generate()
        assert json.loads(str(exc_info.value)) == {"voiceName": "gone-voice"}
