"""
Voice catalogue: tier classification, pricing and the cached voice directory.
"""
from .directory import Voice, VoiceDirectory
from .pricing import PRICE_PER_1M_USD, estimate_cost, rate_for
from .tiers import VoiceTier, classify_voice

__all__ = [
    "Voice",
    "VoiceDirectory",
    "VoiceTier",
    "classify_voice",
    "estimate_cost",
    "rate_for",
    "PRICE_PER_1M_USD",
]
