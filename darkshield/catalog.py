"""
Pattern Catalog — Immutable Dark-Pattern Definitions

The catalog defines:
  1. Which manipulative UI patterns exist (immutable definitions)
  2. The literal keywords and phrase expressions that signal each one
  3. The severity tier each pattern carries
  4. The sensitivity profiles that decide how aggressively to report

The catalog is loaded once at import time and never mutated. The
classifier reads it by reference; nothing at runtime can add, remove,
or redefine a category.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern, Union

logger = logging.getLogger(__name__)


# ============================================================
# DATA STRUCTURES
# ============================================================

class CategoryId(str, Enum):
    """Identifiers of every dark-pattern category, in catalog order."""
    CONFIRMSHAMING = "CONFIRMSHAMING"
    HIDDEN_COSTS = "HIDDEN_COSTS"
    FAKE_URGENCY = "FAKE_URGENCY"
    SCARCITY = "SCARCITY"
    TRICKY_WORDING = "TRICKY_WORDING"
    VISUAL_MANIPULATION = "VISUAL_MANIPULATION"
    FORCED_ACTION = "FORCED_ACTION"
    PRESELECTION = "PRESELECTION"
    MISDIRECTION = "MISDIRECTION"
    COOKIE_MANIPULATION = "COOKIE_MANIPULATION"


@dataclass(frozen=True)
class PatternCategory:
    """
    A dark-pattern category.

    Keywords are matched as case-insensitive substrings. Phrases are
    compiled case-insensitive expressions; each phrase contributes at
    most one match per text.
    """
    id: CategoryId
    name: str
    description: str
    severity: str                   # "low", "medium", "high"
    keywords: tuple[str, ...]
    phrases: tuple[Pattern[str], ...]


@dataclass(frozen=True)
class SensitivityProfile:
    """Threshold pair controlling when a finding is reported."""
    name: str
    min_confidence: int     # 0-100
    min_matches: int        # >= 1


def _phrases(*sources: str) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(s, re.IGNORECASE) for s in sources)


# ============================================================
# CATEGORY DEFINITIONS
# ============================================================

CATEGORIES: tuple[PatternCategory, ...] = (
    PatternCategory(
        id=CategoryId.CONFIRMSHAMING,
        name="Confirmshaming",
        description="Uses guilt or shame to manipulate your decision",
        severity="high",
        keywords=(
            "no thanks, i",
            "no, i don't want",
            "i don't care about",
            "i hate saving",
            "i prefer to pay full",
            "i'm not interested in",
            "i don't like",
            "not for me",
            "i'll pass on",
            "skip and miss out",
            "no, i want to pay more",
            "decline and lose",
            "i'd rather not save",
            "no, keep me uninformed",
            "i don't need help",
            "i prefer staying",
            "no, i'll stay",
            "continue being",
            "remain unprotected",
            "stay vulnerable",
        ),
        phrases=_phrases(
            r"no,?\s*(thanks|thank you),?\s*i('ll|'m|\s+will|\s+am|\s+would|\s+prefer)",
            r"i\s+(don't|do not|dont)\s+(want|need|care|like)",
            r"skip\s+(and\s+)?(miss|lose|pay)",
            r"decline\s+(and\s+)?(lose|miss|pay)",
            r"continue\s+(without|being|to be)",
            r"remain\s+(un\w+|without)",
            r"stay\s+(un\w+|vulnerable|unprotected)",
            r"i('ll|'m|\s+will|\s+would)\s+pass",
            r"keep\s+me\s+(un\w+|in\s+the\s+dark)",
        ),
    ),
    PatternCategory(
        id=CategoryId.HIDDEN_COSTS,
        name="Hidden Costs",
        description="Fees revealed only at checkout or in fine print",
        severity="high",
        keywords=(
            "processing fee",
            "service fee",
            "handling fee",
            "convenience fee",
            "booking fee",
            "administration fee",
            "platform fee",
            "transaction fee",
            "delivery fee added",
            "taxes not included",
            "additional charges",
            "extra charges apply",
            "fees may apply",
            "subject to fees",
            "plus tax",
            "excluding tax",
            "vat not included",
            "surcharge",
            "mandatory tip",
        ),
        phrases=_phrases(
            r"\+\s*\$?\d+(\.\d{2})?\s*(fee|charge|tax)",
            r"additional\s+\$?\d+",
            r"(fee|charge|cost)s?\s+(may\s+)?apply",
            r"prices?\s+(do\s+)?not\s+include",
            r"subject\s+to\s+(additional\s+)?(fee|charge|cost)",
            r"plus\s+\$?\d+",
            r"\$?\d+(\.\d{2})?\s+(service|handling|booking|processing)\s+fee",
        ),
    ),
    PatternCategory(
        id=CategoryId.FAKE_URGENCY,
        name="Fake Urgency",
        description="Creates false time pressure to rush your decision",
        severity="high",
        keywords=(
            "limited time",
            "act now",
            "hurry",
            "don't miss",
            "last chance",
            "ending soon",
            "expires today",
            "offer ends",
            "time is running out",
            "only today",
            "today only",
            "flash sale",
            "deal expires",
            "sale ends in",
            "countdown",
            "hours left",
            "minutes left",
            "seconds left",
            "before it's gone",
            "while supplies last",
            "going fast",
            "selling out",
            "almost gone",
            "running out",
        ),
        phrases=_phrases(
            r"only\s+\d+\s*(hours?|minutes?|days?|seconds?)\s*(left|remaining)",
            r"(offer|sale|deal|discount)\s+(ends?|expires?)\s+(in|today|soon|tonight|tomorrow)",
            r"(ends?|expires?)\s+(in\s+)?\d+:\d+",
            r"\d+:\d+(:\d+)?\s*(left|remaining)",
            r"(hurry|quick|fast|rush)[,!]?\s*(before|while|limited)",
            r"(last|final)\s+(chance|opportunity|day|hours?)",
            r"time('s|\s+is)\s+(running\s+)?out",
            r"don'?t\s+(miss|wait|delay)",
        ),
    ),
    PatternCategory(
        id=CategoryId.SCARCITY,
        name="Scarcity",
        description="False claims about limited availability",
        severity="medium",
        keywords=(
            "only",
            "left in stock",
            "remaining",
            "low stock",
            "almost sold out",
            "selling fast",
            "high demand",
            "popular item",
            "people viewing",
            "people bought",
            "in cart",
            "limited stock",
            "limited availability",
            "limited edition",
            "exclusive",
            "rare",
            "few remaining",
            "nearly gone",
            "last one",
        ),
        phrases=_phrases(
            r"only\s+\d+\s*(left|remaining|available|in\s+stock)",
            r"\d+\s*(people|users|customers|others)\s+(are\s+)?(viewing|looking|watching|bought)",
            r"\d+\s+sold\s+(in\s+)?(last|past)\s+\d+\s*(hours?|days?|minutes?)",
            r"(low|limited)\s+stock",
            r"(selling|going)\s+(fast|quickly)",
            r"high\s+demand",
            r"\d+\s+(people\s+)?have\s+this\s+in\s+(their\s+)?cart",
            r"(almost|nearly)\s+(sold\s+out|gone)",
        ),
    ),
    PatternCategory(
        id=CategoryId.TRICKY_WORDING,
        name="Tricky Wording",
        description="Confusing language designed to mislead",
        severity="high",
        keywords=(
            "uncheck to",
            "check to not",
            "opt out",
            "unsubscribe to continue",
            "don't not",
            "unless you",
            "by not",
            "if you don't",
            "failure to",
            "non-",
            "untick",
            "deselect",
        ),
        phrases=_phrases(
            r"un(check|tick|select)\s+(to|if|this)",
            r"(check|tick|select)\s+(to\s+)?(not|avoid|prevent|stop)",
            r"don'?t\s+not\s+",
            r"unless\s+you\s+(don'?t|do\s+not)",
            r"by\s+(not\s+)?(un)?(checking|selecting|ticking)",
            r"opt\s*-?\s*out\s+(to|of|from)",
            r"failure\s+to\s+(un)?",
            r"if\s+you\s+(don'?t|do\s+not)\s+(want|wish)",
            r"leave\s+(un)?checked\s+(to|if)",
        ),
    ),
    PatternCategory(
        id=CategoryId.VISUAL_MANIPULATION,
        name="Visual Manipulation",
        description="Design tricks to guide you to certain choices",
        severity="medium",
        # Detected from region geometry and styling, never from text
        keywords=(),
        phrases=(),
    ),
    PatternCategory(
        id=CategoryId.FORCED_ACTION,
        name="Forced Action",
        description="Requires unnecessary action to proceed",
        severity="high",
        keywords=(
            "required to continue",
            "must accept",
            "mandatory",
            "required field",
            "cannot proceed",
            "to continue, you must",
            "agree to continue",
            "accept to proceed",
            "sign up to",
            "create account to",
            "login required",
            "register to",
            "subscribe to access",
            "subscribe to view",
            "complete survey",
        ),
        phrases=_phrases(
            r"(must|have\s+to|need\s+to|required\s+to)\s+(accept|agree|subscribe|sign\s*up|register|create)",
            r"to\s+(continue|proceed|access|view|download),?\s+(you\s+)?(must|need|have)",
            r"(cannot|can'?t|won'?t\s+be\s+able\s+to)\s+(proceed|continue|access)\s+(without|unless)",
            r"mandatory\s+(field|registration|signup|subscription)",
            r"(login|sign\s*in|register|sign\s*up)\s+(required|to\s+(continue|access|view))",
            r"subscribe\s+to\s+(access|view|continue|unlock)",
        ),
    ),
    PatternCategory(
        id=CategoryId.PRESELECTION,
        name="Preselection",
        description="Options pre-selected against your interest",
        severity="medium",
        keywords=(
            "pre-selected",
            "already selected",
            "recommended",
            "suggested",
            "default",
            "automatically",
            "by default",
            "opt-in",
            "newsletter",
            "marketing",
            "promotional",
            "special offers",
            "partner offers",
            "third party",
        ),
        phrases=_phrases(
            r"send\s+(me\s+)?(emails?|offers?|promotions?|news(letters?)?)",
            r"receive\s+(special\s+)?offers?",
            r"subscribe\s+(me\s+)?to",
            r"keep\s+me\s+(updated|informed)",
            r"share\s+(my\s+)?(data|information|details)\s+with",
            r"partner\s+offers?",
            r"third\s*-?\s*party",
            r"marketing\s+(emails?|communications?|materials?)",
        ),
    ),
    PatternCategory(
        id=CategoryId.MISDIRECTION,
        name="Misdirection",
        description="Draws attention away from important information",
        severity="medium",
        keywords=(
            "terms and conditions apply",
            "see terms",
            "see details",
            "learn more",
            "click here for details",
            "subject to",
            "restrictions apply",
            "conditions apply",
            "exclusions apply",
            "read the fine print",
            "small print",
            "asterisk",
        ),
        phrases=_phrases(
            r"\*+\s*(terms|conditions|restrictions|exclusions)",
            r"see\s+(full\s+)?(terms|details|conditions)",
            r"(terms|conditions|restrictions)\s+apply",
            r"subject\s+to\s+(terms|conditions|availability)",
            r"for\s+(full\s+)?(details|terms),?\s+(see|click|visit)",
        ),
    ),
    PatternCategory(
        id=CategoryId.COOKIE_MANIPULATION,
        name="Cookie Manipulation",
        description="Tricks to get you to accept all cookies",
        severity="high",
        keywords=(
            "accept all",
            "accept cookies",
            "agree all",
            "allow all",
            "enable all",
            "accept and continue",
            "i agree",
            "got it",
            "ok, i understand",
            "customize",
            "manage preferences",
            "reject all",
            "decline",
            "necessary only",
            "essential only",
        ),
        phrases=_phrases(
            r"accept\s+(all\s+)?(cookies?|tracking)",
            r"(allow|enable)\s+all\s*(cookies?)?",
            r"agree\s+(to\s+)?all",
            r"we\s+use\s+cookies?\s+to",
            r"by\s+(continuing|using|browsing),?\s+(you\s+)?(agree|accept|consent)",
            r"this\s+(site|website)\s+uses?\s+cookies?",
        ),
    ),
)


# ============================================================
# SENSITIVITY PROFILES
# ============================================================

SENSITIVITY_PROFILES: dict[str, SensitivityProfile] = {
    "low": SensitivityProfile(name="low", min_confidence=70, min_matches=3),
    "medium": SensitivityProfile(name="medium", min_confidence=50, min_matches=2),
    "high": SensitivityProfile(name="high", min_confidence=30, min_matches=1),
}

DEFAULT_SENSITIVITY = "medium"

SEVERITY_COLORS: dict[str, str] = {
    "high": "#ef4444",
    "medium": "#f59e0b",
    "low": "#10b981",
}


def resolve_profile(
    sensitivity: Union[SensitivityProfile, str, None],
) -> SensitivityProfile:
    """
    Return the profile for a name or pass a profile through.

    Unknown or missing names fall back to the medium profile.
    """
    if isinstance(sensitivity, SensitivityProfile):
        return sensitivity
    if sensitivity is None:
        return SENSITIVITY_PROFILES[DEFAULT_SENSITIVITY]
    profile = SENSITIVITY_PROFILES.get(str(sensitivity).lower())
    if profile is None:
        logger.warning("Unknown sensitivity profile, using medium", extra={"sensitivity": str(sensitivity)})
        return SENSITIVITY_PROFILES[DEFAULT_SENSITIVITY]
    return profile


def severity_color(severity: str) -> str:
    """Display colour for a severity tier. Unknown tiers use medium."""
    return SEVERITY_COLORS.get(severity, SEVERITY_COLORS["medium"])


# ============================================================
# THE CATALOG
# ============================================================

class PatternCatalog:
    """
    Read-only registry of pattern categories.

    Lookups never raise: a missing id returns None and the caller
    decides what to do with it.
    """

    def __init__(self, categories: tuple[PatternCategory, ...] = CATEGORIES):
        self._categories = categories
        self._by_id = {c.id: c for c in categories}

    def get_categories(self) -> list[PatternCategory]:
        return list(self._categories)

    def get(self, category_id: Union[CategoryId, str]) -> Optional[PatternCategory]:
        try:
            key = CategoryId(category_id)
        except (ValueError, TypeError):
            return None
        return self._by_id.get(key)

    def __len__(self) -> int:
        return len(self._categories)

    def describe(self) -> list[dict]:
        """
        Return every category as a plain dict.

        Used by the GET /patterns endpoint to expose the detection surface.
        """
        return [
            {
                "id": c.id.value,
                "name": c.name,
                "description": c.description,
                "severity": c.severity,
                "color": severity_color(c.severity),
                "keywords": len(c.keywords),
                "phrases": len(c.phrases),
            }
            for c in self._categories
        ]


# ============================================================
# SINGLETON — instantiated once, never mutated
# ============================================================

catalog = PatternCatalog()
