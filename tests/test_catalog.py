"""
Tests for the pattern catalog and sensitivity profiles.
"""

import dataclasses

import pytest

from darkshield.catalog import (
    CATEGORIES,
    CategoryId,
    PatternCatalog,
    SENSITIVITY_PROFILES,
    SensitivityProfile,
    catalog,
    resolve_profile,
    severity_color,
)


class TestCategories:
    def test_ten_categories_in_order(self):
        ids = [c.id for c in catalog.get_categories()]
        assert ids == list(CategoryId)
        assert len(catalog) == 10

    def test_get_by_enum(self):
        category = catalog.get(CategoryId.FAKE_URGENCY)
        assert category is not None
        assert category.name == "Fake Urgency"
        assert category.severity == "high"

    def test_get_by_string(self):
        category = catalog.get("SCARCITY")
        assert category is not None
        assert category.name == "Scarcity"
        assert category.severity == "medium"

    def test_missing_id_returns_none(self):
        assert catalog.get("NOT_A_PATTERN") is None
        assert catalog.get(None) is None

    def test_visual_manipulation_has_no_text_rules(self):
        visual = catalog.get(CategoryId.VISUAL_MANIPULATION)
        assert visual.keywords == ()
        assert visual.phrases == ()

    def test_every_severity_is_a_known_tier(self):
        for category in CATEGORIES:
            assert category.severity in ("low", "medium", "high")

    def test_keywords_are_lowercase(self):
        for category in CATEGORIES:
            for keyword in category.keywords:
                assert keyword == keyword.lower()

    def test_categories_are_immutable(self):
        category = catalog.get(CategoryId.CONFIRMSHAMING)
        with pytest.raises(dataclasses.FrozenInstanceError):
            category.severity = "low"

    def test_get_categories_returns_a_copy(self):
        listed = catalog.get_categories()
        listed.clear()
        assert len(catalog.get_categories()) == 10

    def test_custom_catalog(self):
        custom = PatternCatalog(CATEGORIES[:2])
        assert len(custom) == 2
        assert custom.get(CategoryId.SCARCITY) is None

    def test_describe(self):
        described = catalog.describe()
        assert described[0]["id"] == "CONFIRMSHAMING"
        assert described[0]["color"] == "#ef4444"
        assert all("keywords" in d and "phrases" in d for d in described)


class TestPhraseExpressions:
    def test_phrases_are_case_insensitive(self):
        urgency = catalog.get(CategoryId.FAKE_URGENCY)
        assert any(p.search("OFFER ENDS TONIGHT") for p in urgency.phrases)

    def test_confirmshaming_phrase(self):
        shaming = catalog.get(CategoryId.CONFIRMSHAMING)
        assert any(p.search("No thanks, I'll pay full price") for p in shaming.phrases)

    def test_hidden_cost_phrase(self):
        costs = catalog.get(CategoryId.HIDDEN_COSTS)
        assert any(p.search("+ $4.99 service fee") for p in costs.phrases)


class TestSensitivityProfiles:
    def test_profile_values(self):
        assert SENSITIVITY_PROFILES["low"] == SensitivityProfile("low", 70, 3)
        assert SENSITIVITY_PROFILES["medium"] == SensitivityProfile("medium", 50, 2)
        assert SENSITIVITY_PROFILES["high"] == SensitivityProfile("high", 30, 1)

    def test_resolve_by_name(self):
        assert resolve_profile("high").min_confidence == 30
        assert resolve_profile("HIGH").min_matches == 1

    def test_unknown_name_falls_back_to_medium(self):
        assert resolve_profile("paranoid").name == "medium"
        assert resolve_profile(None).name == "medium"

    def test_profile_passes_through(self):
        custom = SensitivityProfile("custom", 10, 4)
        assert resolve_profile(custom) is custom


class TestSeverityColor:
    def test_known(self):
        assert severity_color("high") == "#ef4444"
        assert severity_color("low") == "#10b981"

    def test_unknown_uses_medium(self):
        assert severity_color("critical") == "#f59e0b"
