"""
Voice Directory Cache.

Fetches the list of synthesis voices from the remote service and keeps
it for a fixed time window. One VoiceDirectory is shared by every
request in the process (see api/dependencies.py).

Behavior:
    - A non-empty cache younger than ttl_seconds is returned as-is,
      without a remote call.
    - Otherwise the remote listing is called once, every record is
      mapped to a Voice (tier derived from the name), and the result is
      stored with the current clock time.
    - If the fetch fails, RemoteUnavailableError is raised. The stale
      cache is NOT served as a fallback.

Concurrency:
    There is no lock. Two requests that both see an expired cache will
    both fetch; the listing is idempotent and the last write wins.

Example:
    >>> directory = VoiceDirectory(fetch=backend.list_voices, ttl_seconds=3600)
    >>> voices = directory.get_voices()
    >>> directory.find("en-US-Standard-A").voice_type
    <VoiceTier.STANDARD: 'STANDARD'>
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from tts_playground.core.config import Defaults
from tts_playground.core.errors import RemoteUnavailableError
from tts_playground.core.logging import error, get_logger, info, verbose
from tts_playground.core.metrics import metrics
from tts_playground.utils.timeit import timeit
from tts_playground.voices.tiers import VoiceTier, classify_voice

_LOG = get_logger("tts-playground.voices")

GENDER_UNSPECIFIED = "SSML_VOICE_GENDER_UNSPECIFIED"


@dataclass(frozen=True)
class Voice:
    """
    A synthesis voice as offered by the remote service.

    Attributes:
        name: Unique voice identifier (e.g., "en-US-Neural2-C").
        language_codes: Supported BCP-47 language tags.
        ssml_gender: MALE, FEMALE, NEUTRAL or SSML_VOICE_GENDER_UNSPECIFIED.
        natural_sample_rate_hertz: Native sample rate, if reported.
        voice_type: Pricing tier derived from the name.
    """
    name: str
    language_codes: Tuple[str, ...]
    ssml_gender: str = GENDER_UNSPECIFIED
    natural_sample_rate_hertz: Optional[int] = None
    voice_type: VoiceTier = VoiceTier.OTHER

    @classmethod
    def from_record(cls, record: Any) -> "Voice":
        """
        Build a Voice from a remote listing record.

        Accepts a mapping or an object exposing name, language_codes,
        ssml_gender and natural_sample_rate_hertz. Missing genders map to
        SSML_VOICE_GENDER_UNSPECIFIED and a zero sample rate to None.
        """
        get = record.get if isinstance(record, Mapping) else (lambda k, d=None: getattr(record, k, d))
        name = str(get("name", "") or "")
        gender = get("ssml_gender", None)
        # proto-plus enums carry .name; plain strings pass through
        gender = getattr(gender, "name", gender) or GENDER_UNSPECIFIED
        sample_rate = get("natural_sample_rate_hertz", None) or None
        return cls(
            name=name,
            language_codes=tuple(get("language_codes", None) or ()),
            ssml_gender=str(gender),
            natural_sample_rate_hertz=int(sample_rate) if sample_rate else None,
            voice_type=classify_voice(name),
        )

    @property
    def primary_language(self) -> Optional[str]:
        return self.language_codes[0] if self.language_codes else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "languageCodes": list(self.language_codes),
            "ssmlGender": self.ssml_gender,
            "naturalSampleRateHertz": self.natural_sample_rate_hertz,
            "voiceType": self.voice_type.value,
        }


class VoiceDirectory:
    """
    TTL cache over the remote voice listing.

    Attributes:
        ttl_seconds: Lifetime of a fetched voice list.
        fetch_count: Number of remote fetches attempted (for monitoring).
    """

    def __init__(
        self,
        fetch: Callable[[], Iterable[Any]],
        ttl_seconds: int = Defaults.VOICES_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            fetch: Remote listing call returning raw voice records.
            ttl_seconds: Cache lifetime in seconds.
            clock: Time source in epoch seconds (injectable for tests).
        """
        self._fetch = fetch
        self.ttl_seconds = int(ttl_seconds)
        self._clock = clock
        self._voices: Tuple[Voice, ...] = ()
        self._fetched_at: Optional[float] = None
        self.fetch_count = 0

    @property
    def fetched_at(self) -> Optional[float]:
        return self._fetched_at

    def is_fresh(self) -> bool:
        """True if a non-empty voice list younger than the TTL is cached."""
        if not self._voices or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self.ttl_seconds

    def get_voices(self) -> Tuple[Voice, ...]:
        """
        Return the current voice list, refreshing it if expired.

        Raises:
            RemoteUnavailableError: If a refresh was needed and failed.
        """
        if self.is_fresh():
            verbose(_LOG, "voices_cache_hit", count=len(self._voices))
            return self._voices
        return self.refresh()

    def refresh(self) -> Tuple[Voice, ...]:
        """
        Fetch the voice list from the remote service unconditionally.

        Raises:
            RemoteUnavailableError: If the remote listing fails.
        """
        self.fetch_count += 1
        now = self._clock()
        try:
            with timeit("list_voices") as t:
                records = list(self._fetch())
        except Exception as e:
            metrics.record_voice_fetch("error")
            error(_LOG, "voices_fetch_failed", error=str(e), error_type=type(e).__name__)
            raise RemoteUnavailableError(
                "Failed to list voices",
                details=str(e) or type(e).__name__,
            ) from e

        voices = tuple(Voice.from_record(r) for r in records)
        self._voices = voices
        self._fetched_at = now
        metrics.record_voice_fetch("success")
        info(_LOG, "voices_fetched", count=len(voices), seconds=round(t.timing.seconds, 3))
        return voices

    def invalidate(self) -> None:
        """Drop the cached list so the next call fetches."""
        self._voices = ()
        self._fetched_at = None

    def find(self, name: str) -> Optional[Voice]:
        """Look up a voice by exact name in the current directory."""
        for voice in self.get_voices():
            if voice.name == name:
                return voice
        return None

    def languages(self, voices: Optional[Iterable[Voice]] = None) -> List[str]:
        """Sorted distinct language tags across voices (default: the current list)."""
        if voices is None:
            voices = self.get_voices()
        return sorted({code for v in voices for code in v.language_codes})

    def voice_types(self, voices: Optional[Iterable[Voice]] = None) -> List[str]:
        """Sorted distinct pricing tiers across voices (default: the current list)."""
        if voices is None:
            voices = self.get_voices()
        return sorted({v.voice_type.value for v in voices})

    def cache_info(self) -> Dict[str, Any]:
        """Cache metadata for GET /voices."""
        cached_at = None
        if self._fetched_at is not None:
            cached_at = datetime.fromtimestamp(self._fetched_at, tz=timezone.utc).isoformat()
        return {
            "ttlSec": self.ttl_seconds,
            "cachedAt": cached_at,
            "count": len(self._voices),
        }
