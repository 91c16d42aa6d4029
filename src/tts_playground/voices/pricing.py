"""
Pricing Estimator.

Prices are USD per one million characters, taken from the public Google
Cloud Text-to-Speech pricing page. They are estimates only; the console
shows the disclaimer from PRICING_NOTE next to every figure.

Example:
    >>> estimate_cost(VoiceTier.STANDARD, 5)
    2e-05
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping

from tts_playground.voices.tiers import VoiceTier, restrictions_table

CURRENCY = "USD"

PRICING_NOTE = (
    "Prices are estimates based on Google Cloud Text-to-Speech pricing page. "
    "Verify in your Cloud Console."
)

PRICE_PER_1M_USD: Mapping[VoiceTier, float] = MappingProxyType({
    VoiceTier.STANDARD: 4,
    VoiceTier.WAVENET: 4,
    VoiceTier.NEURAL2: 16,
    VoiceTier.STUDIO: 160,
    VoiceTier.CHIRP_HD: 30,
    VoiceTier.POLYGLOT: 16,
    VoiceTier.OTHER: 16,
})

DEFAULT_RATE_PER_1M_USD = PRICE_PER_1M_USD[VoiceTier.OTHER]


def rate_for(tier: VoiceTier | str | None) -> float:
    """USD per million characters for a tier; unknown tiers get the default rate."""
    try:
        return PRICE_PER_1M_USD[VoiceTier(tier)]
    except ValueError:
        return DEFAULT_RATE_PER_1M_USD


def estimate_cost(tier: VoiceTier | str | None, character_count: int) -> float:
    """
    Estimate the cost of synthesizing character_count characters.

    Args:
        tier: Voice pricing tier.
        character_count: Billed characters (markup included).

    Returns:
        Estimated USD cost, never negative.

    Raises:
        ValueError: If character_count is negative.
    """
    if character_count < 0:
        raise ValueError(f"character_count must be non-negative, got {character_count}")
    return (rate_for(tier) / 1_000_000) * character_count


def pricing_table() -> Dict[str, Any]:
    """Response body for GET /pricing."""
    return {
        "currency": CURRENCY,
        "per1MCharacters": {tier.value: rate for tier, rate in PRICE_PER_1M_USD.items()},
        "note": PRICING_NOTE,
        "restrictions": restrictions_table(),
    }
