"""
Trusted Sites

URLs matching these patterns are treated as trusted by callers that
compute the is_trusted input of the content assessor. Local files are
never trusted.
"""

from __future__ import annotations

import re
from typing import Optional

TRUSTED_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE) for p in (
        # Search engines
        r"^https?://(www\.)?google\.[a-z]{2,3}(\.[a-z]{2})?",
        r"^https?://(www\.)?bing\.com",
        # Major tech
        r"^https?://(www\.)?github\.com",
        r"^https?://(www\.)?stackoverflow\.com",
        r"^https?://(www\.)?microsoft\.com",
        r"^https?://(www\.)?apple\.com",
    )
)


def is_whitelisted(url: Optional[str]) -> bool:
    if not url:
        return False
    return any(p.match(url) for p in TRUSTED_PATTERNS)


def is_trusted_url(url: Optional[str]) -> bool:
    if not url or url[:5].lower() == "file:":
        return False
    return is_whitelisted(url)
