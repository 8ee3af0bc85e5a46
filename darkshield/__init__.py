"""
DarkShield — Dark Pattern and Phishing Detection Engine

Deterministic, rule-based analysis of page text and URLs.

Public API:
  - catalog:            Immutable dark-pattern category registry
  - classifier:         Per-region classifier and page scan
  - domain_analyzer:    URL trust verdicts (typosquatting, TLD, subdomain, IP)
  - content_assessor:   Phishing likelihood from page content
  - merge_verdicts:     Combine domain and content verdicts for one page
  - manipulation_score, emotional_score, confidence: lexical scoring

Usage:
    from darkshield import classifier, domain_analyzer, content_assessor
    findings = classifier.classify("Hurry! Offer ends tonight.", "high")
    verdict = domain_analyzer.analyze("https://amaz0n.com")
"""

__version__ = "1.0.0"

from darkshield.catalog import (
    catalog,
    CategoryId,
    PatternCatalog,
    PatternCategory,
    SensitivityProfile,
    SENSITIVITY_PROFILES,
    resolve_profile,
)
from darkshield.scorer import manipulation_score, emotional_score, confidence
from darkshield.classifier import classifier, ThreatClassifier, Finding, ScanResult
from darkshield.regions import PageRegion, StaticRegion
from darkshield.domain import domain_analyzer, DomainAnalyzer, DomainVerdict
from darkshield.content import (
    content_assessor,
    ContentRiskAssessor,
    ContentVerdict,
    merge_verdicts,
)

__all__ = [
    "catalog",
    "CategoryId",
    "PatternCatalog",
    "PatternCategory",
    "SensitivityProfile",
    "SENSITIVITY_PROFILES",
    "resolve_profile",
    "manipulation_score",
    "emotional_score",
    "confidence",
    "classifier",
    "ThreatClassifier",
    "Finding",
    "ScanResult",
    "PageRegion",
    "StaticRegion",
    "domain_analyzer",
    "DomainAnalyzer",
    "DomainVerdict",
    "content_assessor",
    "ContentRiskAssessor",
    "ContentVerdict",
    "merge_verdicts",
]
