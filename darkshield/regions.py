"""
Page Regions — Collaborator Interface

The engine never touches a live page. Everything it needs from a
rendered document comes through PageRegion: the text a region shows,
the measured areas of its controls, whether it hides privacy options
in small or faded text, and a stable identifier.

StaticRegion is the plain-data implementation used by the HTTP layer
and by tests. A browser-side collaborator measures the page and ships
these values over the wire.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


# Structural heuristics a collaborator uses to enumerate candidate regions
CANDIDATE_SELECTORS: tuple[str, ...] = (
    # Cookie banners
    '[class*="cookie"]', '[id*="cookie"]', '[class*="consent"]',
    '[id*="consent"]', '[class*="gdpr"]', '[id*="gdpr"]',
    '[class*="privacy"]', '[id*="privacy-banner"]',
    # Modals and popups
    '[class*="modal"]', '[class*="popup"]', '[class*="overlay"]',
    '[class*="dialog"]', '[role="dialog"]', '[role="alertdialog"]',
    # Notifications
    '[class*="notification"]', '[class*="banner"]', '[class*="toast"]',
    '[class*="alert"]',
    # Forms and checkout
    '[class*="checkout"]', '[class*="cart"]', '[class*="subscribe"]',
    '[class*="newsletter"]', '[class*="signup"]', '[class*="opt"]',
    # Buttons and CTAs
    'button', '[class*="btn"]', '[class*="button"]', '[class*="cta"]',
    'a[href*="subscribe"]', 'a[href*="signup"]',
    # Labels and checkboxes
    'label', 'input[type="checkbox"]',
    # Urgency indicators
    '[class*="timer"]', '[class*="countdown"]', '[class*="stock"]',
    '[class*="limited"]', '[class*="urgent"]',
)

ACCEPT_WORDS = ("accept", "agree", "allow", "yes", "continue", "ok")
REJECT_WORDS = ("reject", "decline", "deny", "no", "manage", "customize")
PRIVACY_WORDS = ("privacy", "terms", "opt", "unsubscribe")

SMALL_FONT_PX = 10
FADED_OPACITY = 0.5

_WHITESPACE = re.compile(r"\s+")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def candidate_selectors() -> str:
    """The candidate selectors joined into a single selector list."""
    return ", ".join(CANDIDATE_SELECTORS)


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class ControlArea:
    """
    A measured button-like control inside a region.

    An explicit role is authoritative. An "unknown" control is judged by
    its text, and the accept and reject tests are independent: a label
    such as "Yes, notify me" passes both.
    """
    role: str           # "accept", "reject", "unknown"
    area: float
    text: str = ""

    def is_accept(self) -> bool:
        if self.role in ("accept", "reject"):
            return self.role == "accept"
        return has_accept_word(self.text)

    def is_reject(self) -> bool:
        if self.role in ("accept", "reject"):
            return self.role == "reject"
        return has_reject_word(self.text)


@dataclass(frozen=True)
class StyledText:
    """A small text node (link, span, small) with its computed style."""
    text: str
    font_size: float
    opacity: float = 1.0


@dataclass(frozen=True)
class PathSegment:
    """One ancestor in a region's element path."""
    tag: str
    id: str = ""
    class_name: str = ""

    def selector(self) -> str:
        selector = self.tag.lower()
        if self.id:
            selector += "#" + self.id
        elif self.class_name:
            selector += "." + ".".join(c for c in self.class_name.split(" ") if c)
        return selector


# ============================================================
# COLLABORATOR INTERFACE
# ============================================================

class PageRegion(ABC):
    """Abstract base for candidate regions handed to the classifier."""

    @abstractmethod
    def extract_text(self) -> str:
        """Displayed text plus accessible label, title and placeholder."""
        ...

    @abstractmethod
    def measure_control_areas(self) -> list[ControlArea]:
        ...

    @abstractmethod
    def find_small_or_faded_privacy_text(self) -> bool:
        ...

    @abstractmethod
    def stable_region_id(self) -> str:
        ...

    def is_visible(self) -> bool:
        return True


# ============================================================
# HELPERS
# ============================================================

def has_accept_word(text: str) -> bool:
    lowered = (text or "").lower()
    return any(w in lowered for w in ACCEPT_WORDS)


def has_reject_word(text: str) -> bool:
    lowered = (text or "").lower()
    return any(w in lowered for w in REJECT_WORDS)


def hash_string(value: str) -> str:
    """
    32-bit multiplicative rolling hash (h * 31 + unit), base-36 encoded.

    Iterates UTF-16 code units so identifiers match those computed by a
    browser-side collaborator for the same path.
    """
    data = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    h = abs(h)

    if h == 0:
        return "0"
    digits = []
    while h:
        h, rem = divmod(h, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def region_id_from_path(path: list[PathSegment], element_id: str = "") -> str:
    """Own id when present, otherwise 'dp-' plus the hash of the root-first path."""
    if element_id:
        return element_id
    joined = " > ".join(segment.selector() for segment in path)
    return "dp-" + hash_string(joined)


# ============================================================
# PLAIN-DATA REGION
# ============================================================

@dataclass
class StaticRegion(PageRegion):
    """A region whose text, geometry and styling were measured elsewhere."""
    text: str = ""
    aria_label: Optional[str] = None
    title: Optional[str] = None
    placeholder: Optional[str] = None
    element_id: str = ""
    path: list[PathSegment] = field(default_factory=list)
    width: float = 1.0
    height: float = 1.0
    display: str = "block"
    visibility: str = "visible"
    opacity: float = 1.0
    controls: list[ControlArea] = field(default_factory=list)
    styled_text: list[StyledText] = field(default_factory=list)

    def extract_text(self) -> str:
        text = self.text or ""
        for extra in (self.aria_label, self.title, self.placeholder):
            if extra:
                text += " " + extra
        return _WHITESPACE.sub(" ", text).strip()

    def measure_control_areas(self) -> list[ControlArea]:
        return list(self.controls)

    def find_small_or_faded_privacy_text(self) -> bool:
        for node in self.styled_text:
            if node.font_size < SMALL_FONT_PX or node.opacity < FADED_OPACITY:
                lowered = (node.text or "").lower()
                if any(w in lowered for w in PRIVACY_WORDS):
                    return True
        return False

    def stable_region_id(self) -> str:
        return region_id_from_path(self.path, self.element_id)

    def is_visible(self) -> bool:
        return (
            self.width > 0
            and self.height > 0
            and self.display != "none"
            and self.visibility != "hidden"
            and self.opacity != 0
        )
