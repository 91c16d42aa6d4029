"""
Prometheus Metrics for the playground service.

Metrics Exposed:
    playground_synth_requests_total      - Synthesis requests by voice type and status
    playground_synth_remote_seconds      - Histogram of remote synthesis latency
    playground_synth_characters_total    - Billed characters by voice type
    playground_estimated_cost_usd_total  - Running total of estimated spend
    playground_voice_fetches_total       - Remote voice-list fetches by status

Usage:
    from tts_playground.core.metrics import metrics

    metrics.record_synthesis("CHIRP_HD", "success", remote_seconds=0.42,
                             characters=120, cost_usd=0.0036)
    metrics.record_voice_fetch("success")

    content, content_type = metrics.get_metrics_response()
"""
from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class PlaygroundMetrics:
    """
    Metric collection on a private CollectorRegistry.

    A private registry keeps repeated app construction in tests from
    tripping duplicate-timeseries errors in the default registry.
    """

    def __init__(self):
        self._registry = CollectorRegistry()

        self._synth_requests = Counter(
            "playground_synth_requests_total",
            "Total synthesis requests",
            ["voice_type", "status"],
            registry=self._registry,
        )
        self._synth_remote_seconds = Histogram(
            "playground_synth_remote_seconds",
            "Remote synthesis call duration in seconds",
            ["voice_type"],
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
            registry=self._registry,
        )
        self._synth_characters = Counter(
            "playground_synth_characters_total",
            "Characters sent for synthesis (billing count)",
            ["voice_type"],
            registry=self._registry,
        )
        self._estimated_cost = Counter(
            "playground_estimated_cost_usd_total",
            "Estimated spend in USD",
            ["voice_type"],
            registry=self._registry,
        )
        self._voice_fetches = Counter(
            "playground_voice_fetches_total",
            "Remote voice list fetches",
            ["status"],
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_synthesis(
        self,
        voice_type: str,
        status: str,
        remote_seconds: float | None = None,
        characters: int = 0,
        cost_usd: float = 0.0,
    ) -> None:
        """
        Record a finished synthesis request.

        Args:
            voice_type: Pricing tier of the voice ("unknown" before lookup).
            status: "success" or an error code.
            remote_seconds: Duration of the remote call, if it was made.
            characters: Billed character count (successful requests only).
            cost_usd: Estimated cost (successful requests only).
        """
        self._synth_requests.labels(voice_type=voice_type, status=status).inc()
        if remote_seconds is not None:
            self._synth_remote_seconds.labels(voice_type=voice_type).observe(remote_seconds)
        if characters > 0:
            self._synth_characters.labels(voice_type=voice_type).inc(characters)
        if cost_usd > 0:
            self._estimated_cost.labels(voice_type=voice_type).inc(cost_usd)

    def record_voice_fetch(self, status: str) -> None:
        self._voice_fetches.labels(status=status).inc()

    def get_metrics_response(self) -> tuple[bytes, str]:
        """
        Get metrics in Prometheus format.

        Returns:
            Tuple of (content_bytes, content_type)
        """
        return generate_latest(self._registry), CONTENT_TYPE_LATEST


# Global singleton: from tts_playground.core.metrics import metrics
metrics = PlaygroundMetrics()
