"""
Voice Tiers and Capability Restrictions.

Google does not report a voice's product family in the voice listing,
so the tier is derived from the voice name. The tier drives two things:
    - the per-character price (voices/pricing.py)
    - which request features the remote service rejects for that family

Name Patterns (checked in this order, first match wins):
    -Studio-                          -> STUDIO
    -Neural2-                         -> NEURAL2
    -Wavenet- / -WaveNet-             -> WAVENET
    -Standard-                        -> STANDARD
    Chirp3-HD / Chirp-HD / -Chirp-    -> CHIRP_HD
    -Polyglot-                        -> POLYGLOT
    anything else                     -> OTHER

Example:
    >>> classify_voice("en-US-Chirp3-HD-Aoede")
    <VoiceTier.CHIRP_HD: 'CHIRP_HD'>
    >>> restricted_features(VoiceTier.CHIRP_HD)
    frozenset({'ssml', 'speaking_rate', 'pitch'})
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Tuple


class VoiceTier(str, Enum):
    """Pricing tier / product family of a voice."""
    STUDIO = "STUDIO"
    NEURAL2 = "NEURAL2"
    WAVENET = "WAVENET"
    STANDARD = "STANDARD"
    CHIRP_HD = "CHIRP_HD"
    POLYGLOT = "POLYGLOT"
    OTHER = "OTHER"


class Feature:
    """Request features a tier may reject."""
    SSML = "ssml"
    SPEAKING_RATE = "speaking_rate"
    PITCH = "pitch"


_PATTERNS: Tuple[Tuple[VoiceTier, Tuple[str, ...]], ...] = (
    (VoiceTier.STUDIO, ("-Studio-",)),
    (VoiceTier.NEURAL2, ("-Neural2-",)),
    (VoiceTier.WAVENET, ("-Wavenet-", "-WaveNet-")),
    (VoiceTier.STANDARD, ("-Standard-",)),
    (VoiceTier.CHIRP_HD, ("Chirp3-HD", "Chirp-HD", "-Chirp-")),
    (VoiceTier.POLYGLOT, ("-Polyglot-",)),
)

# Chirp 3: HD voices accept neither SSML nor speakingRate/pitch.
TIER_RESTRICTIONS: Dict[VoiceTier, FrozenSet[str]] = {
    VoiceTier.CHIRP_HD: frozenset({Feature.SSML, Feature.SPEAKING_RATE, Feature.PITCH}),
}

TIER_LABELS: Dict[VoiceTier, str] = {
    VoiceTier.CHIRP_HD: "Chirp 3: HD",
    VoiceTier.WAVENET: "WaveNet",
    VoiceTier.NEURAL2: "Neural2",
    VoiceTier.STUDIO: "Studio",
    VoiceTier.STANDARD: "Standard",
    VoiceTier.POLYGLOT: "Polyglot",
    VoiceTier.OTHER: "Other",
}


def classify_voice(name: str | None) -> VoiceTier:
    """
    Derive the pricing tier from a voice name.

    Args:
        name: Voice identifier, e.g. "en-US-Neural2-C". None is treated
            as an empty name.

    Returns:
        The first tier whose pattern occurs in the name, else OTHER.
    """
    n = name or ""
    for tier, patterns in _PATTERNS:
        if any(p in n for p in patterns):
            return tier
    return VoiceTier.OTHER


def restricted_features(tier: VoiceTier | str) -> FrozenSet[str]:
    """Features the remote service rejects for this tier (empty if none)."""
    try:
        tier = VoiceTier(tier)
    except ValueError:
        return frozenset()
    return TIER_RESTRICTIONS.get(tier, frozenset())


def tier_label(tier: VoiceTier | str) -> str:
    """Human-readable tier name for UI and warnings."""
    try:
        return TIER_LABELS[VoiceTier(tier)]
    except ValueError:
        return str(tier) or "Other"


def restrictions_table() -> Dict[str, list]:
    """JSON view of TIER_RESTRICTIONS, used by the console to disable controls."""
    return {tier.value: sorted(features) for tier, features in TIER_RESTRICTIONS.items()}
