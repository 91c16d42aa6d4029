"""Tests for Prometheus metrics."""
from __future__ import annotations

import pytest

from tts_playground.core.errors import UnknownVoiceError
from tts_playground.core.metrics import PlaygroundMetrics, metrics
from tts_playground.services.synthesis_service import SynthesizeRequest


def _value(m: PlaygroundMetrics, name: str, **labels) -> float:
    return m.registry.get_sample_value(name, labels) or 0.0


class TestMetricsModule:
    """PlaygroundMetrics recording."""

    def test_record_synthesis_success(self):
        m = PlaygroundMetrics()
        m.record_synthesis("CHIRP_HD", "success", remote_seconds=0.4, characters=100, cost_usd=0.003)

        assert _value(m, "playground_synth_requests_total", voice_type="CHIRP_HD", status="success") == 1
        assert _value(m, "playground_synth_characters_total", voice_type="CHIRP_HD") == 100
        assert _value(m, "playground_estimated_cost_usd_total", voice_type="CHIRP_HD") == 0.003
        assert _value(m, "playground_synth_remote_seconds_count", voice_type="CHIRP_HD") == 1

    def test_record_failure_without_remote_call(self):
        m = PlaygroundMetrics()
        m.record_synthesis("unknown", "UNKNOWN_VOICE")
        assert _value(m, "playground_synth_requests_total", voice_type="unknown", status="UNKNOWN_VOICE") == 1
        assert _value(m, "playground_synth_remote_seconds_count", voice_type="unknown") == 0

    def test_record_voice_fetch(self):
        m = PlaygroundMetrics()
        m.record_voice_fetch("success")
        m.record_voice_fetch("error")
        m.record_voice_fetch("error")
        assert _value(m, "playground_voice_fetches_total", status="error") == 2

    def test_instances_do_not_share_registry(self):
        a, b = PlaygroundMetrics(), PlaygroundMetrics()
        a.record_voice_fetch("success")
        assert _value(b, "playground_voice_fetches_total", status="success") == 0

    def test_metrics_response(self):
        content, content_type = PlaygroundMetrics().get_metrics_response()
        assert b"playground_synth_requests_total" in content
        assert content_type.startswith("text/plain")


class TestServiceRecordsMetrics:
    """SynthesisService reports to the global metrics instance."""

    def test_success_and_unknown_voice(self, service):
        labels_ok = {"voice_type": "STANDARD", "status": "success"}
        labels_bad = {"voice_type": "unknown", "status": "UNKNOWN_VOICE"}
        ok_before = _value(metrics, "playground_synth_requests_total", **labels_ok)
        bad_before = _value(metrics, "playground_synth_requests_total", **labels_bad)
        chars_before = _value(metrics, "playground_synth_characters_total", voice_type="STANDARD")

        service.synthesize(SynthesizeRequest(text="Hello", voice_name="en-US-Standard-A"))
        with pytest.raises(UnknownVoiceError):
            service.synthesize(SynthesizeRequest(text="Hello", voice_name="nope"))

        assert _value(metrics, "playground_synth_requests_total", **labels_ok) == ok_before + 1
        assert _value(metrics, "playground_synth_requests_total", **labels_bad) == bad_before + 1
        assert _value(metrics, "playground_synth_characters_total", voice_type="STANDARD") == chars_before + 5
