"""
Domain Analyzer — URL Trust Verdicts

Given a URL, normalizes its host and runs six independent checks:

  1. Local file          (severity 85)
  2. Typosquatting       (severity 90)
  3. Suspicious TLD      (severity 60)
  4. Suspicious subdomain (severity 85)
  5. Brand-name similarity (severity 75)
  6. Raw IP host         (severity 70)

threat_level is the maximum severity among triggered checks and a
verdict is phishing at 70 or above. Local file URLs short-circuit to a
fixed verdict before any other check runs.

No network access. Everything is computed from the URL string and the
static brand registry below.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

PHISHING_THRESHOLD = 70


# ============================================================
# STATIC REGISTRIES
# ============================================================

BRAND_REGISTRY: dict[str, tuple[str, ...]] = {
    "amazon": (
        "amazon.com", "amazon.in", "amazon.co.uk", "amazon.de", "amazon.fr",
        "amazon.ca", "amazon.co.jp",
    ),
    "google": ("google.com", "google.co.in", "google.co.uk", "gmail.com", "youtube.com"),
    "facebook": ("facebook.com", "fb.com", "instagram.com", "whatsapp.com"),
    "microsoft": ("microsoft.com", "live.com", "outlook.com", "office.com", "xbox.com"),
    "apple": ("apple.com", "icloud.com", "itunes.com"),
    "paypal": ("paypal.com",),
    "netflix": ("netflix.com",),
    "twitter": ("twitter.com", "x.com"),
    "linkedin": ("linkedin.com",),
    "ebay": ("ebay.com", "ebay.in", "ebay.co.uk"),
}

# Legitimate character -> look-alike replacements
TYPO_SUBSTITUTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("a", ("@", "4")),
    ("e", ("3",)),
    ("i", ("1", "l", "!")),
    ("o", ("0",)),
    ("s", ("5", "$")),
    ("g", ("9",)),
    ("l", ("1", "i")),
    ("m", ("rn",)),
    ("w", ("vv",)),
    ("c", ("k",)),
)

SUSPICIOUS_TLDS: tuple[str, ...] = (
    ".tk", ".ml", ".ga", ".cf", ".gq", ".xyz", ".top", ".work",
    ".click", ".link", ".download", ".racing", ".win",
)

LOCAL_FILE_BRAND_TOKENS: tuple[str, ...] = (
    "amazon", "google", "paypal", "facebook", "login", "signin", "bank",
)

_IP_HOST = re.compile(r"^(\d{1,3}\.){3}\d{1,3}$")


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class ThreatCheck:
    """A triggered check."""
    type: str
    description: str
    severity: int
    details: str

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "description": self.description,
            "severity": self.severity,
            "details": self.details,
        }


@dataclass
class DomainVerdict:
    threat_level: int = 0
    is_phishing: bool = False
    threats: list[ThreatCheck] = field(default_factory=list)
    domain: str = ""
    url: str = ""

    @classmethod
    def empty(cls, url: str = "") -> "DomainVerdict":
        return cls(url=url)

    def to_dict(self) -> dict:
        return {
            "threat_level": self.threat_level,
            "is_phishing": self.is_phishing,
            "threats": [t.to_dict() for t in self.threats],
            "domain": self.domain,
            "url": self.url,
        }


# ============================================================
# STRING SIMILARITY
# ============================================================

def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit insert, delete and substitute costs."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], current[j - 1], previous[j]) + 1)
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / longer length. Two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest


def has_common_typo(suspected: str, legitimate: str) -> bool:
    """
    True if suspected is a look-alike substitution, a single inserted or
    dropped character, or an adjacent transposition of legitimate.
    """
    for original, fakes in TYPO_SUBSTITUTIONS:
        for fake in fakes:
            if suspected == legitimate.replace(original, fake):
                return True

    if abs(len(suspected) - len(legitimate)) == 1:
        longer, shorter = (
            (suspected, legitimate) if len(suspected) > len(legitimate)
            else (legitimate, suspected)
        )
        for i in range(len(longer)):
            if longer[:i] + longer[i + 1:] == shorter:
                return True

    for i in range(len(legitimate) - 1):
        swapped = legitimate[:i] + legitimate[i + 1] + legitimate[i] + legitimate[i + 2:]
        if suspected == swapped:
            return True

    return False


# ============================================================
# THE ANALYZER
# ============================================================

class DomainAnalyzer:
    """
    Domain trust analyzer. Stateless apart from its registries.

    analyze() never raises: a URL without a usable host yields the zero
    verdict.
    """

    def __init__(
        self,
        brands: Optional[dict[str, tuple[str, ...]]] = None,
        suspicious_tlds: tuple[str, ...] = SUSPICIOUS_TLDS,
    ):
        self._brands = brands if brands is not None else BRAND_REGISTRY
        self._suspicious_tlds = suspicious_tlds

    def analyze(self, url: Optional[str]) -> DomainVerdict:
        if not isinstance(url, str) or not url:
            return DomainVerdict.empty(url or "")

        if _is_local_file(url):
            return self._analyze_local_file(url)

        try:
            host = urlsplit(url).hostname
        except ValueError:
            logger.debug("Unparsable URL", extra={"error": "urlsplit"})
            return DomainVerdict.empty(url)
        if not host:
            return DomainVerdict.empty(url)

        verdict = DomainVerdict(domain=host.lower(), url=url)
        checks = (
            self.check_local_file(url),
            self.check_typosquatting(verdict.domain),
            self.check_suspicious_tld(verdict.domain),
            self.check_suspicious_subdomain(verdict.domain),
            self.check_domain_similarity(verdict.domain),
            self.check_ip_address(verdict.domain),
        )
        for check in checks:
            if check is not None:
                verdict.threats.append(check)
                verdict.threat_level = max(verdict.threat_level, check.severity)

        verdict.is_phishing = verdict.threat_level >= PHISHING_THRESHOLD
        return verdict

    def _analyze_local_file(self, url: str) -> DomainVerdict:
        filename = url.split("/")[-1].lower()
        threat_level = 85
        threats = [ThreatCheck(
            type="Local File Website",
            description="This page is loaded from a local file, not a real website",
            severity=85,
            details="Legitimate websites are never served directly from your computer's file system",
        )]

        for name in LOCAL_FILE_BRAND_TOKENS:
            if name in filename:
                threats.append(ThreatCheck(
                    type="Brand Impersonation",
                    description=f"This local file appears to be impersonating {name}",
                    severity=95,
                    details=f'The filename contains "{name}" but this is not the official {name} website',
                ))
                threat_level = 95
                break

        return DomainVerdict(
            threat_level=threat_level,
            is_phishing=True,
            threats=threats,
            domain="file://",
            url=url,
        )

    # --- Individual checks: each returns a ThreatCheck or None ---

    def check_local_file(self, url: str) -> Optional[ThreatCheck]:
        if _is_local_file(url):
            return ThreatCheck(
                type="Local File",
                description="Page served from local file system",
                severity=85,
                details="Legitimate websites are accessed via http:// or https://",
            )
        return None

    def check_typosquatting(self, domain: str) -> Optional[ThreatCheck]:
        for brand, legit_domains in self._brands.items():
            for legit in legit_domains:
                score = similarity(domain, legit)
                if score > 0.7 and domain != legit:
                    if has_common_typo(domain, legit) or score > 0.85:
                        return ThreatCheck(
                            type="Typosquatting",
                            description=f"This domain closely resembles {legit}",
                            severity=90,
                            details=(
                                f"Possible attempt to impersonate {brand}. "
                                f"The official domain is {legit}"
                            ),
                        )
        return None

    def check_suspicious_tld(self, domain: str) -> Optional[ThreatCheck]:
        for tld in self._suspicious_tlds:
            if domain.endswith(tld):
                return ThreatCheck(
                    type="Suspicious Domain Extension",
                    description=f"The {tld} extension is commonly used in phishing attacks",
                    severity=60,
                    details=(
                        "Legitimate companies typically use standard extensions "
                        "like .com, .org, or country codes"
                    ),
                )
        return None

    def check_suspicious_subdomain(self, domain: str) -> Optional[ThreatCheck]:
        parts = domain.split(".")
        if len(parts) <= 2:
            return None

        # Everything left of the registrable name
        subdomain = ".".join(parts[:-2])
        main_domain = ".".join(parts[-2:])
        for brand, legit_domains in self._brands.items():
            if brand in subdomain and domain not in legit_domains:
                return ThreatCheck(
                    type="Suspicious Subdomain",
                    description=f'Subdomain contains "{brand}" but main domain is {main_domain}',
                    severity=85,
                    details=(
                        f"This may be an attempt to impersonate {brand}. "
                        "Check the full domain carefully."
                    ),
                )
        return None

    def check_domain_similarity(self, domain: str) -> Optional[ThreatCheck]:
        base = domain.split(".")[0]
        for brand, legit_domains in self._brands.items():
            if similarity(base, brand) > 0.7 and base != brand:
                if domain not in legit_domains:
                    return ThreatCheck(
                        type="Similar Domain Name",
                        description=f'Domain name is similar to "{brand}"',
                        severity=75,
                        details=f"This domain closely resembles {brand} but may not be legitimate",
                    )
        return None

    def check_ip_address(self, domain: str) -> Optional[ThreatCheck]:
        if _IP_HOST.match(domain):
            return ThreatCheck(
                type="IP Address",
                description="Website is accessed via IP address instead of domain name",
                severity=70,
                details="Legitimate websites typically use domain names, not IP addresses",
            )
        return None


def _is_local_file(url: str) -> bool:
    return url[:7].lower() == "file://"


# ============================================================
# SINGLETON — instantiated once, never mutated
# ============================================================

domain_analyzer = DomainAnalyzer()
