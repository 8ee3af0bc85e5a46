"""
API Schemas — Request and Response Models

Pydantic models for the DarkShield API.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

from darkshield.config import settings
from darkshield.regions import ControlArea, PathSegment, StaticRegion, StyledText

_SENSITIVITY = "^(low|medium|high)$"


# ============================================================
# REGIONS
# ============================================================

class ControlPayload(BaseModel):
    text: str = ""
    area: float = Field(..., ge=0)
    role: Optional[str] = Field(None, pattern="^(accept|reject|unknown)$")


class StyledTextPayload(BaseModel):
    text: str
    font_size: float = Field(..., ge=0)
    opacity: float = Field(1.0, ge=0, le=1)


class PathSegmentPayload(BaseModel):
    tag: str = Field(..., min_length=1)
    id: str = ""
    class_name: str = ""


class RegionPayload(BaseModel):
    """A candidate region measured by the page-hosting collaborator."""
    text: str = Field("", max_length=20_000)
    aria_label: Optional[str] = None
    title: Optional[str] = None
    placeholder: Optional[str] = None
    element_id: str = ""
    path: list[PathSegmentPayload] = Field(default_factory=list)
    width: float = 1.0
    height: float = 1.0
    display: str = "block"
    visibility: str = "visible"
    opacity: float = 1.0
    controls: list[ControlPayload] = Field(default_factory=list)
    styled_text: list[StyledTextPayload] = Field(default_factory=list)

    def to_region(self) -> StaticRegion:
        return StaticRegion(
            text=self.text,
            aria_label=self.aria_label,
            title=self.title,
            placeholder=self.placeholder,
            element_id=self.element_id,
            path=[PathSegment(tag=p.tag, id=p.id, class_name=p.class_name) for p in self.path],
            width=self.width,
            height=self.height,
            display=self.display,
            visibility=self.visibility,
            opacity=self.opacity,
            controls=[
                ControlArea(role=c.role or "unknown", area=c.area, text=c.text)
                for c in self.controls
            ],
            styled_text=[
                StyledText(text=s.text, font_size=s.font_size, opacity=s.opacity)
                for s in self.styled_text
            ],
        )


# ============================================================
# SCAN / CLASSIFY
# ============================================================

class ScanRequest(BaseModel):
    """POST /scan request body."""
    regions: list[RegionPayload] = Field(..., max_length=settings.MAX_REGIONS)
    sensitivity: Optional[str] = Field(None, pattern=_SENSITIVITY,
                                       description="Sensitivity profile: low, medium or high.")
    url: Optional[str] = Field(None, max_length=2048,
                               description="Page URL, used for statistics only.")


class ClassifyRequest(BaseModel):
    """POST /classify request body."""
    text: str = Field(..., min_length=1, max_length=20_000)
    sensitivity: Optional[str] = Field(None, pattern=_SENSITIVITY)
    region_id: str = ""

    model_config = {"json_schema_extra": {"examples": [
        {"text": "Hurry! Only 2 left in stock. Offer ends tonight.", "sensitivity": "high"},
    ]}}


class MatchResponse(BaseModel):
    kind: str
    value: str


class FindingResponse(BaseModel):
    type: str
    description: str
    severity: str
    confidence: int
    text: str
    matches: list[MatchResponse]
    region_id: str


class ScanResponse(BaseModel):
    findings: list[FindingResponse]
    regions_scanned: int
    sensitivity: str
    engine_version: str


class ClassifyResponse(BaseModel):
    findings: list[FindingResponse]
    sensitivity: str
    engine_version: str


class TextAnalysisRequest(BaseModel):
    """POST /analyze/text request body."""
    text: str = Field(..., min_length=1, max_length=50_000)
    max_phrases: int = Field(5, ge=1, le=50)


# ============================================================
# PHISHING
# ============================================================

class DomainRequest(BaseModel):
    """POST /analyze/domain request body."""
    url: str = Field(..., min_length=1, max_length=2048)


class ContentRequest(BaseModel):
    """POST /analyze/content request body."""
    page_text: str = Field("", max_length=200_000)
    page_title: str = Field("", max_length=2048)
    host: str = Field("", max_length=255)
    is_trusted: bool = False
    has_password_field: bool = False
    has_identity_field: bool = False


class SiteRequest(BaseModel):
    """POST /analyze/site request body."""
    url: str = Field(..., min_length=1, max_length=2048)
    page_text: str = Field("", max_length=200_000)
    page_title: str = Field("", max_length=2048)
    has_password_field: bool = False
    has_identity_field: bool = False


class ThreatResponse(BaseModel):
    type: str
    description: str
    severity: int
    details: str


class IndicatorResponse(BaseModel):
    type: str
    score: int
    details: str


class DomainResponse(BaseModel):
    threat_level: int
    is_phishing: bool
    threats: list[ThreatResponse]
    domain: str
    url: str


class ContentResponse(BaseModel):
    threat_level: int
    is_phishing: bool
    threats: list[ThreatResponse]
    indicators: list[IndicatorResponse]
    mentioned_brand: Optional[str] = None
    breakdown: dict


class SiteResponse(BaseModel):
    threat_level: int
    is_phishing: bool
    threats: list[ThreatResponse]
    indicators: list[IndicatorResponse]
    domain: str
    url: str
    is_whitelisted: bool


# ============================================================
# HEALTH / STATS
# ============================================================

class StatsResponse(BaseModel):
    total_scans: int
    total_findings: int
    phishing_detections: int
    sites_scanned: int
    uptime_seconds: float


class HealthResponse(BaseModel):
    status: str
    version: str
    engine_version: str
    categories: int
    default_sensitivity: str
