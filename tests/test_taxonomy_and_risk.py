"""
Unit tests for the condition taxonomy and the risk table.
"""

import pytest

from src.core.schemas import CONDITION_NAMES, RiskLevel
from src.services.risk_service import RISK_TABLE, stratify
from src.services.taxonomy_service import TAXONOMY, match


# =============================================================================
# Test: taxonomy matching
# =============================================================================

class TestTaxonomyMatch:
    @pytest.mark.parametrize("raw, expected", [
        ("calculus", "Calculus"),
        ("Dental_Caries_v2", "Caries"),
        ("GINGIVITIS", "Gingivitis"),
        ("tooth discoloration", "Tooth Discoloration"),
        ("discoloration_stage1", "Tooth Discoloration"),
        ("mouth_ulcer", "Mouth Ulcer"),
        ("Ulcers", "Mouth Ulcer"),
        ("hypodontia", "Hypodontia"),
    ])
    def test_substring_case_insensitive(self, raw, expected):
        assert match(raw) == expected

    def test_unknown_label_is_dropped(self):
        assert match("healthy") is None
        assert match("") is None

    def test_first_entry_wins(self):
        # contains both "caries" and "ulcer"; Caries is earlier in the table
        assert match("ulcer_or_caries") == "Caries"
        assert match("calculus_gingivitis") == "Calculus"

    def test_order_is_fixed(self):
        assert tuple(name for name, _ in TAXONOMY) == CONDITION_NAMES


# =============================================================================
# Test: risk table
# =============================================================================

class TestStratify:
    @pytest.mark.parametrize("name, confidence, expected", [
        ("Caries", 0.71, RiskLevel.High),
        ("Caries", 0.7, RiskLevel.Medium),
        ("Caries", 0.51, RiskLevel.Medium),
        ("Caries", 0.5, RiskLevel.Low),
        ("Gingivitis", 0.81, RiskLevel.High),
        ("Gingivitis", 0.8, RiskLevel.Medium),
        ("Gingivitis", 0.6, RiskLevel.Low),
        ("Hypodontia", 0.85, RiskLevel.High),
        ("Hypodontia", 0.65, RiskLevel.Medium),
        ("Calculus", 0.61, RiskLevel.Medium),
        ("Calculus", 0.6, RiskLevel.Low),
        ("Mouth Ulcer", 0.71, RiskLevel.Medium),
        ("Mouth Ulcer", 0.7, RiskLevel.Low),
        ("Tooth Discoloration", 0.75, RiskLevel.Medium),
        ("Tooth Discoloration", 0.7, RiskLevel.Low),
    ])
    def test_thresholds(self, name, confidence, expected):
        assert stratify(name, confidence) == expected

    @pytest.mark.parametrize("name", ["Calculus", "Mouth Ulcer", "Tooth Discoloration"])
    def test_two_band_conditions_never_high(self, name):
        assert stratify(name, 1.0) == RiskLevel.Medium

    def test_unknown_name_defaults_low(self):
        assert stratify("Periodontitis", 0.99) == RiskLevel.Low

    @pytest.mark.parametrize("name", list(RISK_TABLE))
    def test_monotonic_in_confidence(self, name):
        levels = [stratify(name, i / 100) for i in range(101)]
        assert all(a <= b for a, b in zip(levels, levels[1:]))

    def test_every_condition_has_bands(self):
        assert set(RISK_TABLE) == set(CONDITION_NAMES)


class TestRiskLevel:
    def test_ordinal(self):
        assert RiskLevel.Low < RiskLevel.Medium < RiskLevel.High
        assert max([RiskLevel.Medium, RiskLevel.High, RiskLevel.Low]) == RiskLevel.High

    def test_labels(self):
        assert RiskLevel.Low.label == "Safe"
        assert RiskLevel.Medium.label == "Monitor"
        assert RiskLevel.High.label == "See Dentist"
