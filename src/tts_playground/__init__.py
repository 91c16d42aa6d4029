"""
tts-playground: compare Google Cloud Text-to-Speech voices.

A small FastAPI service and browser console for listening to the voices
offered by Google Cloud Text-to-Speech side by side, with latency and
cost estimates for every clip.

Key Features:
    - Cached voice directory with per-voice pricing tier
    - Synthesis proxy with tier-aware downgrades (e.g. no SSML on Chirp 3: HD)
    - Cost estimate per request from the public price list
    - Browser console with a replayable history
    - Command line for listing voices, estimating cost and synthesizing

Example Usage:
    >>> from tts_playground.voices import VoiceTier, estimate_cost
    >>> estimate_cost(VoiceTier.STUDIO, 1_000_000)
    160.0
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
