"""
Console Session - client side of the playground.

The same logic as the browser console (static/index.html), usable from
Python and the `tts-playground console` command:

    - fetch the voice directory and restriction table once per session
    - keep form state (language, tier, voice, encoding, input type,
      prosody, text)
    - clear SSML/prosody for restricted tiers before submitting, so the
      server never has to downgrade a request the console built
    - POST /api/synthesize, decode the base64 audio, and prepend the
      result to a capped most-recent-first history
    - replay a history entry without another request

Example:
    >>> with ConsoleSession("http://127.0.0.1:7069") as session:
    ...     session.load()
    ...     session.form.text = "Hello there"
    ...     entry = session.generate()
    ...     Path("hello.mp3").write_bytes(entry.audio)
"""
from __future__ import annotations

import base64
import json
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Deque, Dict, List, Optional

import httpx

from tts_playground.core.logging import get_logger, info, verbose

_LOG = get_logger("tts-playground.console")

HISTORY_LIMIT = 20
DEFAULT_TEXT = "Hello! This is a quick test of Google Text-to-Speech."


class ConsoleError(Exception):
    """An error to show the user; message is the server's error/details text."""


def format_usd(amount: Optional[float]) -> str:
    """Format a cost estimate like the console does ($0, 1.23e-05, $0.000160)."""
    if amount is None or amount != amount:
        return "-"
    if amount == 0:
        return "$0"
    if amount < 0.0001:
        return f"${amount:.2e}"
    return f"${amount:.6f}"


@dataclass
class ConsoleForm:
    """Form state of the console."""
    language: str = "en-US"
    voice_type: str = "CHIRP_HD"
    voice_name: str = ""
    audio_encoding: str = "MP3"
    input_type: str = "text"
    speaking_rate: float = 1.0
    pitch: float = 0.0
    volume_gain_db: Optional[float] = None
    text: str = DEFAULT_TEXT


@dataclass
class HistoryEntry:
    """
    One generated clip.

    Attributes:
        id: Random entry id.
        created_at: Client-side creation time (UTC ISO-8601).
        audio: Decoded audio bytes.
        mime_type: MIME type reported by the server.
        data: Full response body.
        client_total_ms: Round-trip time measured by the console.
    """
    id: str
    created_at: str
    audio: bytes
    mime_type: str
    data: Dict[str, Any]
    client_total_ms: int

    @property
    def audio_src(self) -> str:
        """data: URL, the form the browser player uses."""
        return f"data:{self.mime_type};base64,{base64.b64encode(self.audio).decode('ascii')}"

    @property
    def voice_name(self) -> str:
        return self.data["voice"]["name"]

    @property
    def estimated_cost_usd(self) -> float:
        return self.data["metrics"]["billingEstimate"]["estimatedCostUsd"]

    @property
    def warnings(self) -> List[str]:
        return list(self.data.get("warnings") or [])


class ConsoleSession:
    """
    A console session against a running playground server.

    The voice directory is fetched once per session (load()); call
    load(force=True) to refetch.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:7069",
        client: Optional[httpx.Client] = None,
        history_limit: int = HISTORY_LIMIT,
        api_prefix: str = "/api",
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=None)
        self._owns_client = client is None
        self._prefix = api_prefix.rstrip("/")
        self.form = ConsoleForm()
        self.voices: List[Dict[str, Any]] = []
        self.languages: List[str] = []
        self.voice_types: List[str] = []
        self.restrictions: Dict[str, List[str]] = {}
        self._history: Deque[HistoryEntry] = deque(maxlen=history_limit)
        self.current: Optional[HistoryEntry] = None
        self._loaded = False

    def __enter__(self) -> "ConsoleSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # =========================================================================
    # HTTP
    # =========================================================================

    def _get(self, path: str) -> Dict[str, Any]:
        try:
            res = self._client.get(f"{self._prefix}{path}")
        except httpx.HTTPError as e:
            raise ConsoleError(f"Backend not reachable. {e}") from e
        if res.status_code != 200:
            raise ConsoleError(f"{path.lstrip('/')} failed: {res.status_code}")
        return res.json()

    @staticmethod
    def _error_text(res: httpx.Response) -> str:
        try:
            data = res.json()
        except ValueError:
            return f"HTTP {res.status_code}"
        details = data.get("details")
        if details:
            return details if isinstance(details, str) else json.dumps(details)
        return data.get("error") or f"HTTP {res.status_code}"

    # =========================================================================
    # Directory and form state
    # =========================================================================

    def load(self, force: bool = False) -> None:
        """Fetch voices and tier restrictions, then pick default form values."""
        if self._loaded and not force:
            return
        data = self._get("/voices")
        self.voices = list(data.get("voices") or [])
        self.languages = list(data.get("languages") or [])
        self.voice_types = list(data.get("voiceTypes") or [])
        self.restrictions = dict(self._get("/pricing").get("restrictions") or {})
        self._loaded = True

        # Chirp HD if available, else Neural2, else whatever comes first
        if any(v.get("voiceType") == "CHIRP_HD" for v in self.voices):
            self.form.voice_type = "CHIRP_HD"
        elif "NEURAL2" in self.voice_types:
            self.form.voice_type = "NEURAL2"
        elif self.voice_types:
            self.form.voice_type = self.voice_types[0]

        if "en-US" in self.languages:
            self.form.language = "en-US"
        elif self.languages:
            self.form.language = self.languages[0]

        self.sync_voice()
        info(_LOG, "console_loaded", voices=len(self.voices), languages=len(self.languages))

    def filtered_voices(self) -> List[Dict[str, Any]]:
        """Voices matching the selected language and tier, sorted by name."""
        lang = self.form.language
        tier = self.form.voice_type
        voices = [
            v for v in self.voices
            if (not lang or lang in (v.get("languageCodes") or []))
            and (not tier or v.get("voiceType") == tier)
        ]
        return sorted(voices, key=lambda v: v["name"])

    def sync_voice(self) -> None:
        """Keep voice_name inside the filtered list and clear restricted controls."""
        voices = self.filtered_voices()
        if voices and not any(v["name"] == self.form.voice_name for v in voices):
            self.form.voice_name = voices[0]["name"]
        if self.is_restricted("ssml"):
            self.form.input_type = "text"
        if self.is_restricted("speaking_rate"):
            self.form.speaking_rate = 1.0
        if self.is_restricted("pitch"):
            self.form.pitch = 0.0

    def is_restricted(self, feature: str) -> bool:
        """True if the selected tier rejects feature (ssml, speaking_rate, pitch)."""
        return feature in self.restrictions.get(self.form.voice_type, [])

    def select(self, **changes: Any) -> None:
        """Update form fields and re-apply voice selection rules."""
        for key, value in changes.items():
            if not hasattr(self.form, key):
                raise AttributeError(f"unknown form field: {key}")
            setattr(self.form, key, value)
        self.sync_voice()

    def can_generate(self) -> bool:
        return bool(self.form.text.strip() and self.form.voice_name)

    def build_payload(self) -> Dict[str, Any]:
        """Request body for POST /synthesize from the current form."""
        f = self.form
        payload: Dict[str, Any] = {
            "inputType": "text" if self.is_restricted("ssml") else f.input_type,
            "text": f.text.strip(),
            "voiceName": f.voice_name,
            "languageCode": f.language,
            "audioEncoding": f.audio_encoding,
        }
        if not self.is_restricted("speaking_rate"):
            payload["speakingRate"] = float(f.speaking_rate)
        if not self.is_restricted("pitch"):
            payload["pitch"] = float(f.pitch)
        if f.volume_gain_db is not None:
            payload["volumeGainDb"] = float(f.volume_gain_db)
        return payload

    # =========================================================================
    # Generate and history
    # =========================================================================

    @property
    def history(self) -> List[HistoryEntry]:
        """Most recent first, at most history_limit entries."""
        return list(self._history)

    def generate(self) -> HistoryEntry:
        """
        Synthesize the current form and add the result to the history.

        Raises:
            ConsoleError: The server rejected the request or failed; the
                message is the server's details (or error) text.
        """
        self.load()
        if not self.can_generate():
            raise ConsoleError("Enter some text and pick a voice first.")

        payload = self.build_payload()
        t0 = perf_counter()
        try:
            res = self._client.post(f"{self._prefix}/synthesize", json=payload)
        except httpx.HTTPError as e:
            raise ConsoleError(f"Backend not reachable. {e}") from e
        client_ms = int(round((perf_counter() - t0) * 1000))

        if res.status_code != 200:
            raise ConsoleError(self._error_text(res))

        data = res.json()
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc).isoformat(),
            audio=base64.b64decode(data["audio"]["base64"]),
            mime_type=data["audio"]["mimeType"],
            data=data,
            client_total_ms=client_ms,
        )
        self._history.appendleft(entry)
        self.current = entry
        verbose(_LOG, "console_generated", voice=entry.voice_name, client_ms=client_ms)
        return entry

    def replay(self, entry_id: str) -> HistoryEntry:
        """Make a history entry current again. No request is made."""
        for entry in self._history:
            if entry.id == entry_id:
                self.current = entry
                return entry
        raise KeyError(entry_id)
