"""
Threat Classifier — Per-Region Detection Pipeline

For each region:
  1. Match every catalog category (keywords + phrase expressions)
  2. Score the region text once (manipulation + emotional)
  3. Fuse scores into a confidence per qualifying category
  4. Apply the sensitivity profile
  5. Evaluate visual-manipulation signals from the region collaborator

A page scan runs the pipeline over every visible candidate region and
deduplicates findings by (type, first 50 characters of the excerpt).

The classifier holds no mutable state. It reads the catalog by
reference and is safe to call repeatedly from any number of callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from darkshield.catalog import (
    CategoryId,
    PatternCatalog,
    SensitivityProfile,
    catalog as default_catalog,
    resolve_profile,
)
from darkshield.regions import PageRegion
from darkshield.scorer import confidence, emotional_score, manipulation_score

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 5
EXCERPT_LENGTH = 100
DEDUPE_PREFIX = 50
MAX_SAMPLE_MATCHES = 3

VISUAL_TYPE = "Visual Manipulation"
VISUAL_SEVERITY = "medium"
BUTTON_RATIO_THRESHOLD = 2
BUTTON_RATIO_BASE = 50
BUTTON_RATIO_STEP = 5
BUTTON_RATIO_CAP = 90
FADED_TEXT_CONFIDENCE = 70

Sensitivity = Union[SensitivityProfile, str, None]


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class PatternMatch:
    """A single keyword or phrase hit inside a region."""
    kind: str       # "keyword" or "phrase"
    value: str


@dataclass(frozen=True)
class Finding:
    """A reported dark pattern. Never mutated after creation."""
    type: str
    description: str
    severity: str
    confidence: int
    text: str
    matches: tuple[PatternMatch, ...] = ()
    region_id: str = ""

    def dedupe_key(self) -> tuple[str, str]:
        return (self.type, self.text[:DEDUPE_PREFIX])

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "description": self.description,
            "severity": self.severity,
            "confidence": self.confidence,
            "text": self.text,
            "matches": [{"kind": m.kind, "value": m.value} for m in self.matches],
            "region_id": self.region_id,
        }


@dataclass(frozen=True)
class VisualSignal:
    """Outcome of the visual-manipulation check for one region."""
    detected: bool = False
    confidence: float = 0.0
    description: str = ""
    details: str = ""


@dataclass
class ScanResult:
    findings: list[Finding] = field(default_factory=list)
    regions_scanned: int = 0


def truncate_text(text: str, max_length: int = EXCERPT_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def deduplicate(findings: Iterable[Finding]) -> list[Finding]:
    """Keep the first finding for each dedupe key, preserving order."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for finding in findings:
        key = finding.dedupe_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(finding)
    return unique


# ============================================================
# THE CLASSIFIER
# ============================================================

class ThreatClassifier:
    """
    Deterministic dark-pattern classifier.

    Instantiated once as a singleton over the static catalog. Tests may
    build their own instance over a custom catalog.
    """

    def __init__(self, pattern_catalog: Optional[PatternCatalog] = None):
        self._catalog = pattern_catalog or default_catalog

    def match_patterns(self, text: str) -> dict[CategoryId, list[PatternMatch]]:
        """
        Match text against every category.

        Keywords are substring hits on the lowercased text. Each phrase
        expression contributes its first match only.
        """
        lowered = text.lower()
        results: dict[CategoryId, list[PatternMatch]] = {}

        for category in self._catalog.get_categories():
            hits: list[PatternMatch] = []
            for keyword in category.keywords:
                if keyword.lower() in lowered:
                    hits.append(PatternMatch(kind="keyword", value=keyword))
            for phrase in category.phrases:
                found = phrase.search(text)
                if found:
                    hits.append(PatternMatch(kind="phrase", value=found.group(0)))
            results[category.id] = hits

        return results

    def classify(
        self,
        text: Optional[str],
        sensitivity: Sensitivity = None,
        region_id: str = "",
    ) -> list[Finding]:
        """
        Classify one region's text.

        Returns findings in catalog order. Texts shorter than five
        characters produce no findings.
        """
        if not text or len(text) < MIN_TEXT_LENGTH:
            return []

        profile = resolve_profile(sensitivity)
        pattern_results = self.match_patterns(text)

        # Scores are shared by every category in this region
        manipulation = None
        emotional = None
        findings: list[Finding] = []

        for category_id, hits in pattern_results.items():
            if len(hits) < profile.min_matches:
                continue
            category = self._catalog.get(category_id)
            if category is None:
                logger.warning("Unknown pattern category", extra={"pattern_id": str(category_id)})
                continue

            if manipulation is None:
                manipulation = manipulation_score(text)
                emotional = emotional_score(text)

            score = confidence(manipulation.score, emotional.total_score, len(hits))
            if score < profile.min_confidence:
                continue

            findings.append(Finding(
                type=category.name,
                description=category.description,
                severity=category.severity,
                confidence=score,
                text=truncate_text(text),
                matches=tuple(hits[:MAX_SAMPLE_MATCHES]),
                region_id=region_id,
            ))

        return findings

    def evaluate_visual(self, region: PageRegion) -> VisualSignal:
        """
        Check a region for visual steering.

        (a) accept control more than twice the area of the reject control
        (b) small or faded privacy/opt-out text

        When (b) triggers it replaces the result of (a).
        """
        signal = VisualSignal()

        try:
            controls = region.measure_control_areas()
        except Exception:
            logger.warning("Control measurement failed; treating as absent", exc_info=True)
            controls = []

        if len(controls) >= 2:
            accept = next((c for c in controls if c.is_accept()), None)
            reject = next((c for c in controls if c.is_reject()), None)
            if accept is not None and reject is not None:
                ratio = accept.area / (reject.area or 1)
                if ratio > BUTTON_RATIO_THRESHOLD:
                    signal = VisualSignal(
                        detected=True,
                        confidence=min(BUTTON_RATIO_BASE + ratio * BUTTON_RATIO_STEP, BUTTON_RATIO_CAP),
                        description="Button sizes favor accepting over rejecting",
                        details=f"Accept button is {int(ratio + 0.5)}x larger than reject option",
                    )

        try:
            faded = region.find_small_or_faded_privacy_text()
        except Exception:
            logger.warning("Style inspection failed; treating as absent", exc_info=True)
            faded = False

        if faded:
            signal = VisualSignal(
                detected=True,
                confidence=FADED_TEXT_CONFIDENCE,
                description="Important options are visually de-emphasized",
                details="Privacy/opt-out options use small or faded text",
            )

        return signal

    def classify_region(
        self,
        region: PageRegion,
        sensitivity: Sensitivity = None,
    ) -> list[Finding]:
        """Text findings plus the visual-manipulation finding for one region."""
        profile = resolve_profile(sensitivity)
        text = region.extract_text()
        if not text or len(text) < MIN_TEXT_LENGTH:
            return []

        region_id = region.stable_region_id()
        findings = self.classify(text, profile, region_id=region_id)

        visual = self.evaluate_visual(region)
        if visual.detected and visual.confidence >= profile.min_confidence:
            findings.append(Finding(
                type=VISUAL_TYPE,
                description=visual.description,
                severity=VISUAL_SEVERITY,
                confidence=int(visual.confidence + 0.5),
                text=visual.details,
                matches=(),
                region_id=region_id,
            ))

        return findings

    def scan(
        self,
        regions: Iterable[PageRegion],
        sensitivity: Sensitivity = None,
    ) -> ScanResult:
        """
        Scan every candidate region of a page.

        Regions already seen (same object) or not visible are skipped.
        Findings are deduplicated with first-seen order preserved.
        """
        profile = resolve_profile(sensitivity)
        # Region objects are held so their ids stay unique for the scan
        seen: dict[int, PageRegion] = {}
        findings: list[Finding] = []
        scanned = 0

        for region in regions:
            if id(region) in seen:
                continue
            if not region.is_visible():
                continue
            seen[id(region)] = region
            scanned += 1
            findings.extend(self.classify_region(region, profile))

        unique = deduplicate(findings)
        logger.debug(
            "Page scan complete",
            extra={"findings_count": len(unique), "regions_scanned": scanned},
        )
        return ScanResult(findings=unique, regions_scanned=scanned)


# ============================================================
# SINGLETON — instantiated once, never mutated
# ============================================================

classifier = ThreatClassifier()
