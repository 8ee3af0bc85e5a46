"""
Detector — Scan Orchestrator

Coordinates the engine components for callers:
  - scan_page:    classifier over a page's candidate regions
  - classify_text: classifier over a single text
  - analyze_text:  raw lexical scores for a text
  - analyze_site:  trust list + domain analyzer + content assessor, merged

Each function returns a plain dict ready for serialization. The
components themselves stay pure; timing and logging live here.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from darkshield.catalog import SensitivityProfile, resolve_profile
from darkshield.classifier import classifier
from darkshield.config import settings
from darkshield.content import content_assessor, merge_verdicts
from darkshield.domain import domain_analyzer
from darkshield.regions import PageRegion
from darkshield.scorer import (
    analyze_sentiment,
    emotional_score,
    extract_key_phrases,
    has_double_negative,
    manipulation_score,
)
from darkshield.whitelist import is_trusted_url, is_whitelisted

logger = logging.getLogger(__name__)


def scan_page(
    regions: Iterable[PageRegion],
    sensitivity: Optional[SensitivityProfile | str] = None,
) -> dict:
    """Classify every candidate region and return deduplicated findings."""
    profile = resolve_profile(sensitivity or settings.DEFAULT_SENSITIVITY)
    start = time.perf_counter()
    result = classifier.scan(regions, profile)
    duration = round((time.perf_counter() - start) * 1000, 1)

    logger.info(
        f"Found {len(result.findings)} findings in {result.regions_scanned} regions",
        extra={
            "findings_count": len(result.findings),
            "regions_scanned": result.regions_scanned,
            "sensitivity": profile.name,
            "duration_ms": duration,
        },
    )

    return {
        "findings": [f.to_dict() for f in result.findings],
        "regions_scanned": result.regions_scanned,
        "sensitivity": profile.name,
        "engine_version": settings.ENGINE_VERSION,
    }


def classify_text(
    text: str,
    sensitivity: Optional[SensitivityProfile | str] = None,
    region_id: str = "",
) -> dict:
    profile = resolve_profile(sensitivity or settings.DEFAULT_SENSITIVITY)
    findings = classifier.classify(text, profile, region_id=region_id)
    return {
        "findings": [f.to_dict() for f in findings],
        "sensitivity": profile.name,
        "engine_version": settings.ENGINE_VERSION,
    }


def analyze_text(text: str, max_phrases: int = 5) -> dict:
    """Expose the lexical scores behind a confidence value."""
    manipulation = manipulation_score(text)
    emotional = emotional_score(text)
    sentiment = analyze_sentiment(text)
    return {
        "manipulation": {
            "score": manipulation.score,
            "token_count": manipulation.token_count,
            "matches": [
                {"group": m.group, "token": m.token, "count": m.count}
                for m in manipulation.matches
            ],
        },
        "emotional": {
            "total_score": emotional.total_score,
            "has_any": emotional.has_any,
            "by_tactic": emotional.by_tactic,
        },
        "sentiment": {
            "label": sentiment.label,
            "score": round(sentiment.score, 3),
            "positive": sentiment.positive,
            "negative": sentiment.negative,
        },
        "double_negative": has_double_negative(text),
        "key_phrases": extract_key_phrases(text, max_phrases=max_phrases),
    }


def analyze_site(
    url: str,
    page_text: str = "",
    page_title: str = "",
    has_password_field: bool = False,
    has_identity_field: bool = False,
) -> dict:
    """
    Full phishing verdict for a page: URL checks merged with content checks.

    Whitelisted sites skip analysis entirely and report a zero verdict.
    """
    if is_whitelisted(url):
        return {
            "threat_level": 0,
            "is_phishing": False,
            "threats": [],
            "indicators": [],
            "domain": domain_analyzer.analyze(url).domain,
            "url": url,
            "is_whitelisted": True,
        }

    domain_verdict = domain_analyzer.analyze(url)
    content_verdict = content_assessor.assess(
        page_text,
        page_title,
        domain_verdict.domain,
        is_trusted_url(url),
        has_password_field=has_password_field,
        has_identity_field=has_identity_field,
    )
    merged = merge_verdicts(domain_verdict, content_verdict)

    if merged.is_phishing:
        logger.warning(
            "Phishing page detected",
            extra={"host": merged.domain, "threat_level": merged.threat_level},
        )

    return {**merged.to_dict(), "is_whitelisted": False}
