"""
Lexical Scorer

Computes the two independent text scores the classifier fuses into a
confidence value:

  - manipulation score: weighted lexicon hits on the raw text plus flat
    bonuses for double-negative and confusion phrasing, down-weighted
    for short texts.
  - emotional score: rhetorical-tactic expressions (guilt, fear,
    flattery, scarcity) matched against normalized text.

Every function here is pure and deterministic. Scores are integers in
[0, 100]; rounding is half-up so identical inputs always produce
identical outputs.

Scoring:
  manipulation = round(min(sum * min(tokens / 10, 1), 100))
      sum: 5 per group word, 3 per deceiving positive,
           +15 per double-negative expression, +10 per confusion expression
  emotional    = min(10 * matched occurrences, 100)
  confidence   = round(min(100, m * 0.35 + e * 0.30 + min(matches * 10, 100) * 0.35))
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Pattern

from darkshield.lexicon import (
    CONFUSION_BONUS,
    CONFUSION_PATTERNS,
    DECEIVING_POSITIVES,
    DECEIVING_WEIGHT,
    DOUBLE_NEGATIVE_BONUS,
    DOUBLE_NEGATIVE_PATTERNS,
    EMOTIONAL_TACTICS,
    GROUP_WEIGHT,
    MANIPULATIVE_WORDS,
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    SENTIMENT_THRESHOLD,
    TACTIC_POINTS,
)

# Confidence weights
MANIPULATION_WEIGHT = 0.35
EMOTIONAL_WEIGHT = 0.30
PATTERN_WEIGHT = 0.35


# ============================================================
# RESULT TYPES
# ============================================================

@dataclass(frozen=True)
class LexiconMatch:
    """One lexicon group hit. For phrase families, token is the expression."""
    group: str
    token: str
    count: int


@dataclass(frozen=True)
class ManipulationScore:
    score: int
    matches: list[LexiconMatch] = field(default_factory=list)
    token_count: int = 0


@dataclass(frozen=True)
class EmotionalScore:
    by_tactic: dict[str, list[str]]
    total_score: int
    has_any: bool


@dataclass(frozen=True)
class Sentiment:
    label: str          # "positive", "negative", "neutral"
    score: float        # -1.0 to 1.0
    positive: int
    negative: int


# ============================================================
# TEXT PREPARATION
# ============================================================

_WHITESPACE = re.compile(r"\s+")
_STRIPPED_CHARS = re.compile(r"[^\w\s'$%-]", re.ASCII)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@lru_cache(maxsize=None)
def _word_regex(word: str) -> Pattern[str]:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE | re.ASCII)


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, collapse whitespace, blank out punctuation except ' $ % -."""
    if not text:
        return ""
    lowered = _WHITESPACE.sub(" ", text.lower())
    return _STRIPPED_CHARS.sub(" ", lowered).strip()


def tokenize(text: Optional[str]) -> list[str]:
    """Split normalized text on whitespace, dropping single-character tokens."""
    return [t for t in _WHITESPACE.split(normalize_text(text)) if len(t) > 1]


def _count_word(word: str, text: str) -> int:
    return len(_word_regex(word).findall(text))


# ============================================================
# SCORES
# ============================================================

def manipulation_score(text: Optional[str]) -> ManipulationScore:
    """
    Score manipulative vocabulary in a text.

    Word groups are counted on the raw text with word boundaries. The
    double-negative and confusion families add their bonus once per
    expression that matches, regardless of how often it matches.
    """
    text = text or ""
    tokens = tokenize(text)
    if not tokens:
        return ManipulationScore(score=0, matches=[], token_count=0)

    total = 0.0
    matches: list[LexiconMatch] = []

    for group, words in MANIPULATIVE_WORDS.items():
        for word in words:
            count = _count_word(word, text)
            if count:
                total += count * GROUP_WEIGHT
                matches.append(LexiconMatch(group=group, token=word, count=count))

    for word in DECEIVING_POSITIVES:
        count = _count_word(word, text)
        if count:
            total += count * DECEIVING_WEIGHT
            matches.append(LexiconMatch(group="deceiving", token=word, count=count))

    for pattern in DOUBLE_NEGATIVE_PATTERNS:
        if pattern.search(text):
            total += DOUBLE_NEGATIVE_BONUS
            matches.append(
                LexiconMatch(group="double_negative", token=pattern.pattern, count=1)
            )

    for pattern in CONFUSION_PATTERNS:
        if pattern.search(text):
            total += CONFUSION_BONUS
            matches.append(
                LexiconMatch(group="confusion", token=pattern.pattern, count=1)
            )

    # Short texts carry less evidence
    length_factor = min(len(tokens) / 10, 1)
    score = min(total * length_factor, 100)

    return ManipulationScore(
        score=max(0, _round_half_up(score)),
        matches=matches,
        token_count=len(tokens),
    )


def emotional_score(text: Optional[str]) -> EmotionalScore:
    """Score rhetorical tactics. Every matched occurrence counts."""
    normalized = normalize_text(text)
    by_tactic: dict[str, list[str]] = {}
    total = 0

    for tactic, patterns in EMOTIONAL_TACTICS.items():
        found: list[str] = []
        for pattern in patterns:
            hits = [m.group(0) for m in pattern.finditer(normalized)]
            if hits:
                found.extend(hits)
                total += len(hits) * TACTIC_POINTS
        by_tactic[tactic] = found

    return EmotionalScore(
        by_tactic=by_tactic,
        total_score=min(total, 100),
        has_any=total > 0,
    )


def confidence(
    manipulation: int,
    emotional: int,
    match_count: int,
) -> int:
    """Fuse the lexical scores and the raw pattern-match count into 0-100."""
    pattern_score = min(match_count * 10, 100)
    fused = (
        manipulation * MANIPULATION_WEIGHT
        + emotional * EMOTIONAL_WEIGHT
        + pattern_score * PATTERN_WEIGHT
    )
    return max(0, _round_half_up(min(fused, 100)))


# ============================================================
# AUXILIARY ANALYSIS
# ============================================================

def analyze_sentiment(text: Optional[str]) -> Sentiment:
    normalized = normalize_text(text)
    positive = sum(_count_word(w, normalized) for w in POSITIVE_WORDS)
    negative = sum(_count_word(w, normalized) for w in NEGATIVE_WORDS)

    total = positive + negative
    if total == 0:
        return Sentiment(label="neutral", score=0.0, positive=0, negative=0)

    score = (positive - negative) / total
    label = "neutral"
    if score > SENTIMENT_THRESHOLD:
        label = "positive"
    elif score < -SENTIMENT_THRESHOLD:
        label = "negative"
    return Sentiment(label=label, score=score, positive=positive, negative=negative)


def has_double_negative(text: Optional[str]) -> bool:
    text = text or ""
    return any(p.search(text) for p in DOUBLE_NEGATIVE_PATTERNS)


def extract_key_phrases(text: Optional[str], max_phrases: int = 5) -> list[str]:
    """
    Pull out the sentence fragments surrounding manipulative words.

    At most two fragments per word, unique in first-seen order.
    """
    text = text or ""
    phrases: list[str] = []
    for words in MANIPULATIVE_WORDS.values():
        for word in words:
            regex = re.compile(
                rf"[^.!?]*\b{re.escape(word)}\b[^.!?]*", re.IGNORECASE | re.ASCII,
            )
            found = [m.group(0).strip() for m in regex.finditer(text)]
            phrases.extend(found[:2])

    unique = list(dict.fromkeys(phrases))
    return unique[:max_phrases]
