"""
Threat Classifier Tests

Covers text classification, sensitivity gating, visual-manipulation
signals, region identifiers and page scans with deduplication.
"""

from __future__ import annotations

import pytest

from darkshield.catalog import CategoryId, SensitivityProfile
from darkshield.classifier import (
    Finding,
    ThreatClassifier,
    classifier,
    deduplicate,
    truncate_text,
)
from darkshield.regions import (
    ControlArea,
    PageRegion,
    PathSegment,
    StaticRegion,
    StyledText,
    hash_string,
    region_id_from_path,
)

BANNER = "Only 3 left in stock! Hurry, offer ends tonight!"
PROMO = (
    "Hurry! Only 2 left in stock. This exclusive offer ends tonight, "
    "don't miss out. Limited time deal, act now before it's gone!"
)
COOKIE_TEXT = "We use cookies to improve your experience."


class BrokenRegion(PageRegion):
    """A collaborator whose measurements fail."""

    def extract_text(self) -> str:
        return PROMO

    def measure_control_areas(self):
        raise RuntimeError("layout unavailable")

    def find_small_or_faded_privacy_text(self) -> bool:
        raise RuntimeError("styles unavailable")

    def stable_region_id(self) -> str:
        return "broken"


def _cookie_region(**overrides) -> StaticRegion:
    fields = dict(
        text=COOKIE_TEXT,
        element_id="cookie-banner",
        controls=[
            ControlArea(role="unknown", area=3000, text="Accept all"),
            ControlArea(role="unknown", area=1000, text="Reject"),
        ],
    )
    fields.update(overrides)
    return StaticRegion(**fields)


# ============================================================
# PATTERN MATCHING
# ============================================================

class TestMatchPatterns:
    def test_keywords_and_phrases(self):
        results = classifier.match_patterns(BANNER)
        urgency = results[CategoryId.FAKE_URGENCY]
        assert [m.kind for m in urgency] == ["keyword", "keyword", "phrase"]
        assert urgency[2].value == "offer ends tonight"
        assert len(results[CategoryId.SCARCITY]) == 3

    def test_every_category_present(self):
        results = classifier.match_patterns("nothing to see")
        assert set(results) == set(CategoryId)
        assert all(hits == [] for hits in results.values())

    def test_phrase_counts_once(self):
        results = classifier.match_patterns("Don't miss, don't wait, don't delay")
        urgency = results[CategoryId.FAKE_URGENCY]
        assert len(urgency) == 2
        assert urgency[1].value.lower() == "don't miss"

    def test_keyword_matching_ignores_case(self):
        results = classifier.match_patterns("ACCEPT ALL COOKIES")
        values = [m.value for m in results[CategoryId.COOKIE_MANIPULATION]]
        assert "accept all" in values


# ============================================================
# TEXT CLASSIFICATION
# ============================================================

class TestClassify:
    def test_short_text_rejected(self):
        assert classifier.classify("Buy", "high") == []
        assert classifier.classify("", "high") == []
        assert classifier.classify(None, "high") == []

    def test_banner_stays_below_high_threshold(self):
        # Both categories reach confidence 18, under the high minimum of 30
        assert classifier.classify(BANNER, "high") == []

    def test_promo_high(self):
        findings = classifier.classify(PROMO, "high", region_id="promo")
        assert [f.type for f in findings] == ["Fake Urgency", "Scarcity"]
        urgency, scarcity = findings
        assert urgency.confidence == 54
        assert urgency.severity == "high"
        assert scarcity.confidence == 40
        assert scarcity.severity == "medium"
        assert urgency.region_id == "promo"

    def test_promo_sample_matches(self):
        urgency = classifier.classify(PROMO, "high")[0]
        assert [m.value for m in urgency.matches] == ["limited time", "act now", "hurry"]

    def test_promo_excerpt_truncated(self):
        urgency = classifier.classify(PROMO, "high")[0]
        assert len(urgency.text) == 100
        assert urgency.text.endswith("...")
        assert urgency.text.startswith("Hurry! Only 2 left")

    def test_promo_medium(self):
        findings = classifier.classify(PROMO, "medium")
        assert [f.type for f in findings] == ["Fake Urgency"]

    def test_promo_low(self):
        assert classifier.classify(PROMO, "low") == []

    def test_min_matches_gate(self):
        strict = SensitivityProfile("strict", min_confidence=0, min_matches=2)
        loose = SensitivityProfile("loose", min_confidence=0, min_matches=1)
        assert classifier.classify("Hurry up please", strict) == []
        loose_types = [f.type for f in classifier.classify("Hurry up please", loose)]
        assert loose_types == ["Fake Urgency"]

    def test_findings_are_frozen(self):
        finding = classifier.classify(PROMO, "high")[0]
        with pytest.raises(AttributeError):
            finding.confidence = 99

    def test_to_dict(self):
        data = classifier.classify(PROMO, "high")[0].to_dict()
        assert data["type"] == "Fake Urgency"
        assert data["matches"][0] == {"kind": "keyword", "value": "limited time"}

    def test_deterministic(self):
        assert classifier.classify(PROMO, "high") == classifier.classify(PROMO, "high")


class TestHelpers:
    def test_truncate_short(self):
        assert truncate_text("short") == "short"

    def test_truncate_long(self):
        assert truncate_text("x" * 150) == "x" * 97 + "..."

    def test_deduplicate_uses_type_and_prefix(self):
        base = dict(description="d", severity="high", confidence=50)
        a = Finding(type="Scarcity", text="a" * 60, region_id="r1", **base)
        b = Finding(type="Scarcity", text="a" * 50 + "b" * 10, region_id="r2", **base)
        c = Finding(type="Fake Urgency", text="a" * 60, region_id="r3", **base)
        unique = deduplicate([a, b, c])
        assert [f.region_id for f in unique] == ["r1", "r3"]


# ============================================================
# VISUAL MANIPULATION
# ============================================================

class TestVisualSignals:
    def test_button_ratio(self):
        signal = classifier.evaluate_visual(_cookie_region())
        assert signal.detected is True
        assert signal.confidence == 65
        assert signal.details == "Accept button is 3x larger than reject option"

    def test_ratio_capped(self):
        region = _cookie_region(controls=[
            ControlArea(role="accept", area=10_000),
            ControlArea(role="reject", area=100),
        ])
        assert classifier.evaluate_visual(region).confidence == 90

    def test_small_ratio_not_detected(self):
        region = _cookie_region(controls=[
            ControlArea(role="accept", area=1500),
            ControlArea(role="reject", area=1000),
        ])
        assert classifier.evaluate_visual(region).detected is False

    def test_single_control_not_compared(self):
        region = _cookie_region(controls=[ControlArea(role="accept", area=5000)])
        assert classifier.evaluate_visual(region).detected is False

    def test_first_control_can_pair_with_itself(self):
        # "notify" contains "no", so the first control is also the reject control
        region = StaticRegion(text="Get our newsletter", controls=[
            ControlArea("unknown", 1000, "Yes, notify me"),
            ControlArea("unknown", 100, "Decline"),
        ])
        assert classifier.evaluate_visual(region).detected is False

    def test_accept_and_reject_chosen_independently(self):
        region = StaticRegion(text="Cookie choices", controls=[
            ControlArea("unknown", 500, "Manage options"),
            ControlArea("unknown", 2000, "Accept"),
        ])
        signal = classifier.evaluate_visual(region)
        assert signal.detected is True
        assert signal.details == "Accept button is 4x larger than reject option"

    def test_faded_text_overrides_ratio(self):
        region = _cookie_region(
            controls=[
                ControlArea(role="accept", area=10_000),
                ControlArea(role="reject", area=1000),
            ],
            styled_text=[StyledText("Privacy settings", font_size=8)],
        )
        signal = classifier.evaluate_visual(region)
        assert signal.confidence == 70
        assert signal.description == "Important options are visually de-emphasized"

    def test_faded_by_opacity(self):
        region = _cookie_region(
            controls=[],
            styled_text=[StyledText("Opt out of tracking", font_size=14, opacity=0.3)],
        )
        assert classifier.evaluate_visual(region).confidence == 70

    def test_small_text_without_privacy_words(self):
        region = _cookie_region(
            controls=[],
            styled_text=[StyledText("Copyright 2024", font_size=8)],
        )
        assert classifier.evaluate_visual(region).detected is False

    def test_visual_finding_in_region(self):
        findings = classifier.classify_region(_cookie_region(), "medium")
        assert [f.type for f in findings] == ["Visual Manipulation"]
        visual = findings[0]
        assert visual.confidence == 65
        assert visual.severity == "medium"
        assert visual.region_id == "cookie-banner"
        assert visual.matches == ()

    def test_visual_finding_gated_by_sensitivity(self):
        assert classifier.classify_region(_cookie_region(), "low") == []

    def test_collaborator_failure_treated_as_absent(self):
        findings = classifier.classify_region(BrokenRegion(), "high")
        assert [f.type for f in findings] == ["Fake Urgency", "Scarcity"]
        assert all(f.region_id == "broken" for f in findings)

    def test_short_region_text_skipped(self):
        region = _cookie_region(text="OK")
        assert classifier.classify_region(region, "high") == []


# ============================================================
# REGIONS
# ============================================================

class TestRegions:
    def test_control_words(self):
        assert ControlArea("unknown", 1, "Accept all").is_accept() is True
        assert ControlArea("unknown", 1, "Reject").is_reject() is True
        learn = ControlArea("unknown", 1, "Learn more")
        assert learn.is_accept() is False
        assert learn.is_reject() is False

    def test_label_can_be_both(self):
        both = ControlArea("unknown", 1, "Yes, notify me")
        assert both.is_accept() is True
        assert both.is_reject() is True

    def test_explicit_role_is_authoritative(self):
        control = ControlArea("reject", 1, "Yes, notify me")
        assert control.is_accept() is False
        assert control.is_reject() is True

    def test_hash_string_known_values(self):
        assert hash_string("a") == "2p"
        assert hash_string("ab") == "2e9"
        assert hash_string("") == "0"

    def test_hash_string_stays_base36(self):
        value = hash_string("html > body > div.cookie-consent.visible > div.modal")
        assert value.isalnum()
        assert value == value.lower()

    def test_region_id_from_path(self):
        path = [PathSegment("DIV", class_name="modal"), PathSegment("button", class_name="btn  primary")]
        assert region_id_from_path(path) == "dp-" + hash_string("div.modal > button.btn.primary")

    def test_id_segment_wins_over_classes(self):
        assert PathSegment("div", id="main", class_name="wrapper").selector() == "div#main"

    def test_own_id_preferred(self):
        region = StaticRegion(text=PROMO, element_id="offer", path=[PathSegment("div")])
        assert region.stable_region_id() == "offer"

    def test_region_id_stable(self):
        path = [PathSegment("section", class_name="checkout")]
        first = StaticRegion(text=PROMO, path=path).stable_region_id()
        second = StaticRegion(text=PROMO, path=list(path)).stable_region_id()
        assert first == second
        assert first.startswith("dp-")

    def test_extract_text_includes_labels(self):
        region = StaticRegion(text="Subscribe", aria_label="Join  newsletter", placeholder="Email")
        assert region.extract_text() == "Subscribe Join newsletter Email"

    def test_visibility(self):
        assert StaticRegion(text=PROMO).is_visible() is True
        assert StaticRegion(text=PROMO, width=0).is_visible() is False
        assert StaticRegion(text=PROMO, display="none").is_visible() is False
        assert StaticRegion(text=PROMO, visibility="hidden").is_visible() is False
        assert StaticRegion(text=PROMO, opacity=0).is_visible() is False


# ============================================================
# PAGE SCAN
# ============================================================

class TestScan:
    def test_duplicate_text_across_regions(self):
        regions = [
            StaticRegion(text=PROMO, element_id="first"),
            StaticRegion(text=PROMO, element_id="second"),
        ]
        result = classifier.scan(regions, "high")
        assert result.regions_scanned == 2
        assert [f.type for f in result.findings] == ["Fake Urgency", "Scarcity"]
        assert all(f.region_id == "first" for f in result.findings)

    def test_same_region_scanned_once(self):
        region = StaticRegion(text=PROMO, element_id="only")
        result = classifier.scan([region, region], "high")
        assert result.regions_scanned == 1

    def test_invisible_regions_skipped(self):
        regions = [
            StaticRegion(text=PROMO, element_id="hidden", display="none"),
            StaticRegion(text=COOKIE_TEXT, element_id="shown"),
        ]
        result = classifier.scan(regions, "high")
        assert result.regions_scanned == 1
        assert result.findings == []

    def test_scan_mixes_text_and_visual(self):
        regions = [StaticRegion(text=PROMO, element_id="promo"), _cookie_region()]
        result = classifier.scan(regions, "high")
        assert [f.type for f in result.findings] == [
            "Fake Urgency", "Scarcity", "Visual Manipulation",
        ]

    def test_empty_page(self):
        result = classifier.scan([], "medium")
        assert result.findings == []
        assert result.regions_scanned == 0

    def test_custom_instance(self):
        assert ThreatClassifier().scan([StaticRegion(text=PROMO)], "high").findings
