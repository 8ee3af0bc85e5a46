"""
Content Risk Assessor

Estimates phishing likelihood from what a page says and asks for:
login-form presence, brand mentions and phishing language. Composes
with the domain analyzer's verdict at the calling boundary through
merge_verdicts().

Threat level sequence (order matters, the urgency step is additive):
  1. login form + brand + untrusted host   -> max(level, 85)
  2. urgency score                         -> level + urgency
  3. harvesting risk > 70                  -> max(level, 90)
  4. brand mismatch                        -> max(level, 85)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from darkshield.domain import PHISHING_THRESHOLD, DomainVerdict, ThreatCheck

BRAND_KEYWORDS: tuple[str, ...] = (
    "amazon", "google", "gmail", "facebook", "paypal", "netflix",
    "microsoft", "apple", "icloud", "twitter", "instagram",
    "linkedin", "ebay", "walmart", "bank", "chase", "wells fargo",
    "citibank", "american express", "visa", "mastercard",
)

PHISHING_LANGUAGE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE) for p in (
        r"account.*suspend",
        r"account.*limit",
        r"verify.*account",
        r"confirm.*identity",
        r"unusual.*activity",
        r"security.*alert",
        r"click.*here.*verify",
        r"update.*payment",
        r"expires?.*\d+.*hours?",
        r"action.*required",
        r"reactivate.*account",
    )
)

URGENCY_POINTS = 15
URGENCY_CAP = 50
HARVESTING_THRESHOLD = 70


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class Indicator:
    """A non-blocking signal. Contributes to threat level, never a threat itself."""
    type: str
    score: int
    details: str

    def to_dict(self) -> dict:
        return {"type": self.type, "score": self.score, "details": self.details}


@dataclass
class ContentVerdict:
    threat_level: int = 0
    is_phishing: bool = False
    threats: list[ThreatCheck] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)
    mentioned_brand: Optional[str] = None
    breakdown: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "threat_level": self.threat_level,
            "is_phishing": self.is_phishing,
            "threats": [t.to_dict() for t in self.threats],
            "indicators": [i.to_dict() for i in self.indicators],
            "mentioned_brand": self.mentioned_brand,
            "breakdown": dict(self.breakdown),
        }


@dataclass
class SiteVerdict:
    """Domain and content verdicts merged for one page."""
    threat_level: int = 0
    is_phishing: bool = False
    threats: list[ThreatCheck] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)
    domain: str = ""
    url: str = ""

    def to_dict(self) -> dict:
        return {
            "threat_level": self.threat_level,
            "is_phishing": self.is_phishing,
            "threats": [t.to_dict() for t in self.threats],
            "indicators": [i.to_dict() for i in self.indicators],
            "domain": self.domain,
            "url": self.url,
        }


# ============================================================
# SIGNALS
# ============================================================

def detect_brand_mention(page_text: Optional[str], page_title: Optional[str] = "") -> Optional[str]:
    """First brand keyword, in registry order, found in the text or title."""
    text = (page_text or "").lower()
    title = (page_title or "").lower()
    for brand in BRAND_KEYWORDS:
        if brand in text or brand in title:
            return brand
    return None


def urgency_score(page_text: Optional[str]) -> int:
    """15 points per distinct phishing-language pattern, capped at 50."""
    text = page_text or ""
    hits = sum(1 for p in PHISHING_LANGUAGE_PATTERNS if p.search(text))
    return min(hits * URGENCY_POINTS, URGENCY_CAP)


def harvesting_risk(
    has_login: bool,
    mentioned_brand: Optional[str],
    is_trusted: bool,
    urgency: int,
) -> int:
    risk = 0
    if has_login:
        risk += 30
    if mentioned_brand:
        risk += 20
    if not is_trusted:
        risk += 30
    if urgency > 0:
        risk += 20
    return risk


# ============================================================
# THE ASSESSOR
# ============================================================

class ContentRiskAssessor:
    """Stateless phishing-content assessor."""

    def assess(
        self,
        page_text: Optional[str],
        page_title: Optional[str] = "",
        current_host: Optional[str] = "",
        is_trusted: bool = False,
        has_password_field: bool = False,
        has_identity_field: bool = False,
    ) -> ContentVerdict:
        """
        Assess page content.

        Login presence requires both a password field and an
        email/username field, as reported by the page collaborator.
        """
        host = (current_host or "").lower()
        has_login = bool(has_password_field and has_identity_field)
        brand = detect_brand_mention(page_text, page_title)
        urgency = urgency_score(page_text)

        verdict = ContentVerdict(mentioned_brand=brand)
        level = 0

        if has_login and brand and not is_trusted:
            verdict.threats.append(ThreatCheck(
                type="Suspicious Login Page",
                description="Login form found with brand mentions on untrusted domain",
                severity=85,
                details="This page requests credentials but is not from the official website",
            ))
            level = max(level, 85)
        verdict.breakdown["after_login_check"] = level

        if urgency > 0:
            verdict.indicators.append(Indicator(
                type="Urgency Tactics",
                score=urgency,
                details="Page uses pressure tactics to rush your decision",
            ))
        level += urgency
        verdict.breakdown["urgency_score"] = urgency
        verdict.breakdown["after_urgency"] = level

        risk = harvesting_risk(has_login, brand, is_trusted, urgency)
        if risk > HARVESTING_THRESHOLD:
            verdict.threats.append(ThreatCheck(
                type="Credential Harvesting",
                description="Page appears designed to steal login credentials",
                severity=90,
                details="Multiple suspicious indicators suggest this is a phishing attempt",
            ))
            level = max(level, 90)
        verdict.breakdown["harvesting_risk"] = risk
        verdict.breakdown["after_harvesting"] = level

        if brand and not is_trusted and has_login:
            verdict.threats.append(ThreatCheck(
                type="Brand Impersonation",
                description=f"Page appears to impersonate {brand}",
                severity=85,
                details=f'Content mentions "{brand}" but domain is {host}',
            ))
            level = max(level, 85)
        verdict.breakdown["after_brand_mismatch"] = level

        verdict.threat_level = level
        verdict.is_phishing = level >= PHISHING_THRESHOLD
        return verdict


def merge_verdicts(domain: DomainVerdict, content: ContentVerdict) -> SiteVerdict:
    """Union of threats, maximum threat level, phishing flag recomputed."""
    level = max(domain.threat_level, content.threat_level)
    return SiteVerdict(
        threat_level=level,
        is_phishing=level >= PHISHING_THRESHOLD,
        threats=list(domain.threats) + list(content.threats),
        indicators=list(content.indicators),
        domain=domain.domain,
        url=domain.url,
    )


# ============================================================
# SINGLETON
# ============================================================

content_assessor = ContentRiskAssessor()
