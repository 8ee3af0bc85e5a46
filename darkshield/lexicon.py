"""
Lexicons — Word Groups and Phrase Families for Lexical Scoring

Static tables read by the scorer. Nothing here is computed; every
weight and expression is a fixed part of the scoring contract.
"""

from __future__ import annotations

import re
from typing import Pattern


# ============================================================
# MANIPULATION LEXICON
# ============================================================

# Each whole-word occurrence scores GROUP_WEIGHT points.
GROUP_WEIGHT = 5

MANIPULATIVE_WORDS: dict[str, tuple[str, ...]] = {
    "urgency": (
        "now", "hurry", "quick", "fast", "immediately", "instant", "rush",
        "urgent", "asap", "today", "tonight", "limited",
    ),
    "fear": (
        "miss", "lose", "losing", "lost", "gone", "expire", "end", "last",
        "final", "never", "risk", "danger", "warning",
    ),
    "exclusivity": (
        "exclusive", "special", "unique", "rare", "limited", "only",
        "select", "vip", "premium", "elite",
    ),
    "social": (
        "everyone", "popular", "trending", "bestseller", "favorite",
        "loved", "recommended", "trusted", "verified",
    ),
    "shame": (
        "don't", "hate", "stupid", "fool", "foolish", "miss out", "regret",
        "sorry", "mistake", "wrong",
    ),
    "pressure": (
        "must", "need", "have to", "required", "mandatory", "necessary",
        "essential", "important", "critical",
    ),
}

# Positive words that dark patterns lean on. Weaker signal.
DECEIVING_WEIGHT = 3

DECEIVING_POSITIVES: tuple[str, ...] = (
    "free", "save", "savings", "discount", "deal", "best", "great",
    "amazing", "incredible", "huge", "massive", "bonus", "gift", "reward",
    "win", "winner",
)

# Flat bonus once per distinct expression that matches at least once.
DOUBLE_NEGATIVE_BONUS = 15

DOUBLE_NEGATIVE_PATTERNS: tuple[Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE | re.ASCII) for p in (
        r"not\s+un",
        r"don'?t\s+not",
        r"no\s+non",
        r"never\s+not",
        r"without\s+not",
        r"unless\s+not",
    )
)

CONFUSION_BONUS = 10

CONFUSION_PATTERNS: tuple[Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE | re.ASCII) for p in (
        r"\bnot\b.*\bnot\b",
        r"\bun\w+\b.*\bun\w+\b",
        r"\bnon-?\w+\b.*\bnon-?\w+\b",
        r"opt\s*-?\s*out.*opt\s*-?\s*in",
        r"opt\s*-?\s*in.*opt\s*-?\s*out",
    )
)


# ============================================================
# EMOTIONAL LEXICON
# ============================================================

# Points per matched occurrence, summed across every tactic.
TACTIC_POINTS = 10

EMOTIONAL_TACTICS: dict[str, tuple[Pattern[str], ...]] = {
    "guilt": tuple(re.compile(p, re.IGNORECASE) for p in (
        r"you('ll|'re| will| are)\s+missing",
        r"don'?t\s+you\s+want",
        r"are\s+you\s+sure\s+you\s+don'?t",
        r"most\s+people\s+(choose|select|prefer)",
        r"you('ll|'re| will| are)\s+one\s+of\s+the\s+few",
    )),
    "fear": tuple(re.compile(p, re.IGNORECASE) for p in (
        r"you('ll|'re| will| are)\s+(lose|losing|miss)",
        r"before\s+it'?s\s+too\s+late",
        r"won'?t\s+be\s+able\s+to",
        r"risk\s+(of\s+)?(losing|missing)",
        r"protect\s+(yourself|your)",
    )),
    "flattery": tuple(re.compile(p, re.IGNORECASE) for p in (
        r"you('re|\s+are)\s+(smart|clever|wise)",
        r"people\s+like\s+you",
        r"exclusive\s+(offer\s+)?for\s+you",
        r"specially?\s+(selected|chosen)",
        r"vip|premium\s+member",
    )),
    "scarcity": tuple(re.compile(p, re.IGNORECASE) for p in (
        r"only\s+\d+\s+(left|remaining|available)",
        r"limited\s+(time|quantity|stock|edition)",
        r"\d+\s+people\s+(are\s+)?viewing",
        r"selling\s+(out\s+)?fast",
        r"high\s+demand",
    )),
}


# ============================================================
# SENTIMENT WORDS
# ============================================================

POSITIVE_WORDS: tuple[str, ...] = (
    "great", "good", "best", "love", "amazing", "wonderful", "excellent",
    "fantastic", "happy", "enjoy", "benefit", "success", "win", "reward",
    "free", "save", "easy", "simple", "fast", "quick",
)

NEGATIVE_WORDS: tuple[str, ...] = (
    "bad", "worst", "hate", "terrible", "awful", "horrible", "sad", "angry",
    "fail", "lose", "miss", "risk", "danger", "hard", "difficult", "slow",
    "expensive", "cost", "pay", "charge",
)

SENTIMENT_THRESHOLD = 0.2
