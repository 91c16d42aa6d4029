"""
Tests for voice tier classification and the pricing estimator.

Tests cover:
- Name patterns and their precedence
- Restriction table (Chirp 3: HD)
- Price table values and fallback rate
- Cost estimates (zero, exact million, negative rejected)
"""

import pytest

from tts_playground.voices.pricing import (
    DEFAULT_RATE_PER_1M_USD,
    PRICE_PER_1M_USD,
    estimate_cost,
    pricing_table,
    rate_for,
)
from tts_playground.voices.tiers import (
    Feature,
    VoiceTier,
    classify_voice,
    restricted_features,
    restrictions_table,
    tier_label,
)


class TestClassifyVoice:
    """Tier is derived from the voice name."""

    @pytest.mark.parametrize("name,tier", [
        ("en-US-Standard-A", VoiceTier.STANDARD),
        ("en-US-Neural2-C", VoiceTier.NEURAL2),
        ("en-GB-Wavenet-B", VoiceTier.WAVENET),
        ("en-GB-WaveNet-B", VoiceTier.WAVENET),
        ("de-DE-Studio-B", VoiceTier.STUDIO),
        ("en-US-Chirp3-HD-Aoede", VoiceTier.CHIRP_HD),
        ("en-US-Chirp-HD-F", VoiceTier.CHIRP_HD),
        ("en-US-Polyglot-1", VoiceTier.POLYGLOT),
        ("en-US-Casual-K", VoiceTier.OTHER),
    ])
    def test_patterns(self, name, tier):
        assert classify_voice(name) == tier

    def test_empty_and_none_are_other(self):
        assert classify_voice("") == VoiceTier.OTHER
        assert classify_voice(None) == VoiceTier.OTHER

    def test_first_matching_pattern_wins(self):
        """A name matching two patterns takes the earlier one in the order."""
        assert classify_voice("xx-Studio-Neural2-A") == VoiceTier.STUDIO
        assert classify_voice("xx-Standard-Chirp-A") == VoiceTier.STANDARD


class TestRestrictions:
    """Only Chirp 3: HD rejects features."""

    def test_chirp_hd_restrictions(self):
        assert restricted_features(VoiceTier.CHIRP_HD) == {Feature.SSML, Feature.SPEAKING_RATE, Feature.PITCH}

    @pytest.mark.parametrize("tier", [t for t in VoiceTier if t != VoiceTier.CHIRP_HD])
    def test_other_tiers_unrestricted(self, tier):
        assert restricted_features(tier) == frozenset()

    def test_unknown_tier_unrestricted(self):
        assert restricted_features("NOT_A_TIER") == frozenset()

    def test_restrictions_table_is_json_friendly(self):
        assert restrictions_table() == {"CHIRP_HD": ["pitch", "speaking_rate", "ssml"]}

    def test_labels(self):
        assert tier_label(VoiceTier.CHIRP_HD) == "Chirp 3: HD"
        assert tier_label("WAVENET") == "WaveNet"


class TestPricing:
    """USD per one million characters."""

    def test_table_values(self):
        assert PRICE_PER_1M_USD[VoiceTier.STANDARD] == 4
        assert PRICE_PER_1M_USD[VoiceTier.WAVENET] == 4
        assert PRICE_PER_1M_USD[VoiceTier.NEURAL2] == 16
        assert PRICE_PER_1M_USD[VoiceTier.STUDIO] == 160
        assert PRICE_PER_1M_USD[VoiceTier.CHIRP_HD] == 30
        assert PRICE_PER_1M_USD[VoiceTier.POLYGLOT] == 16
        assert PRICE_PER_1M_USD[VoiceTier.OTHER] == 16

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            PRICE_PER_1M_USD[VoiceTier.STANDARD] = 1  # type: ignore[index]

    def test_unknown_tier_uses_default_rate(self):
        assert rate_for("MYSTERY") == DEFAULT_RATE_PER_1M_USD == 16
        assert rate_for(None) == 16

    def test_zero_characters_cost_nothing(self):
        assert estimate_cost(VoiceTier.STUDIO, 0) == 0

    @pytest.mark.parametrize("tier", list(VoiceTier))
    def test_one_million_characters_cost_the_rate(self, tier):
        assert estimate_cost(tier, 1_000_000) == PRICE_PER_1M_USD[tier]

    def test_small_estimate(self):
        assert estimate_cost(VoiceTier.STANDARD, 5) == (4 / 1_000_000) * 5

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            estimate_cost(VoiceTier.STANDARD, -1)

    def test_pricing_table_shape(self):
        table = pricing_table()
        assert table["currency"] == "USD"
        assert table["per1MCharacters"]["CHIRP_HD"] == 30
        assert "estimates" in table["note"]
        assert table["restrictions"]["CHIRP_HD"]
