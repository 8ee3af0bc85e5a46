"""
DarkShield API — Main Application

POST /scan             — Scan a page's candidate regions for dark patterns
POST /classify         — Classify a single text
POST /analyze/text     — Lexical scores behind a confidence value
POST /analyze/domain   — URL trust verdict
POST /analyze/content  — Phishing verdict from page content
POST /analyze/site     — Domain and content verdicts merged
GET  /patterns         — List pattern categories and sensitivity profiles
GET  /patterns/{id}    — One pattern category
GET  /stats            — Scan statistics
GET  /health           — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from urllib.parse import urlsplit

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from darkshield import __version__
from darkshield.catalog import SENSITIVITY_PROFILES, catalog
from darkshield.config import settings
from darkshield.content import content_assessor
from darkshield.detector import analyze_site, analyze_text, classify_text, scan_page
from darkshield.domain import domain_analyzer
from darkshield.logging import setup_logging, get_logger
from darkshield.stats import scan_stats
from darkshield.schemas.scan import (
    ClassifyRequest,
    ClassifyResponse,
    ContentRequest,
    ContentResponse,
    DomainRequest,
    DomainResponse,
    HealthResponse,
    ScanRequest,
    ScanResponse,
    SiteRequest,
    SiteResponse,
    StatsResponse,
    TextAnalysisRequest,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("DarkShield API starting",
                extra={"engine_version": settings.ENGINE_VERSION,
                       "sensitivity": settings.DEFAULT_SENSITIVITY})
    yield
    logger.info("DarkShield API shutting down")


app = FastAPI(
    title="DarkShield API",
    description="Dark pattern and phishing detection engine",
    version=f"{__version__} (engine {settings.ENGINE_VERSION})",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


@app.get("/", include_in_schema=False)
async def root():
    return JSONResponse({"message": "DarkShield API", "docs": "/docs"})


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The analysis could not be completed."},
    )


def _host_of(url: str | None) -> str:
    if not url:
        return ""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


# ============================================================
# ROUTES — DARK PATTERNS
# ============================================================

@app.post("/scan", response_model=ScanResponse)
async def scan(request: ScanRequest):
    """Scan a page's candidate regions."""
    regions = [r.to_region() for r in request.regions]
    result = scan_page(regions, request.sensitivity)
    await scan_stats.record_scan(_host_of(request.url), len(result["findings"]))
    return result


@app.post("/classify", response_model=ClassifyResponse)
async def classify(request: ClassifyRequest):
    """Classify a single text."""
    return classify_text(request.text, request.sensitivity, region_id=request.region_id)


@app.post("/analyze/text")
async def analyze_text_route(request: TextAnalysisRequest):
    """Manipulation, emotional and sentiment scores for a text."""
    return analyze_text(request.text, max_phrases=request.max_phrases)


# ============================================================
# ROUTES — PHISHING
# ============================================================

@app.post("/analyze/domain", response_model=DomainResponse)
async def analyze_domain(request: DomainRequest):
    verdict = domain_analyzer.analyze(request.url)
    if verdict.is_phishing:
        await scan_stats.record_phishing(verdict.domain)
    logger.info(
        f"Domain verdict: level={verdict.threat_level}",
        extra={"host": verdict.domain, "threat_level": verdict.threat_level,
               "is_phishing": verdict.is_phishing},
    )
    return verdict.to_dict()


@app.post("/analyze/content", response_model=ContentResponse)
async def analyze_content(request: ContentRequest):
    verdict = content_assessor.assess(
        request.page_text,
        request.page_title,
        request.host,
        request.is_trusted,
        has_password_field=request.has_password_field,
        has_identity_field=request.has_identity_field,
    )
    return verdict.to_dict()


@app.post("/analyze/site", response_model=SiteResponse)
async def analyze_site_route(request: SiteRequest):
    """Merged domain + content verdict for one page."""
    result = analyze_site(
        request.url,
        page_text=request.page_text,
        page_title=request.page_title,
        has_password_field=request.has_password_field,
        has_identity_field=request.has_identity_field,
    )
    if result["is_phishing"]:
        await scan_stats.record_phishing(result["domain"])
    return result


# ============================================================
# ROUTES — META
# ============================================================

@app.get("/patterns")
async def get_patterns():
    """Return the detection surface: categories and sensitivity profiles."""
    patterns = catalog.describe()
    return {
        "engine_version": settings.ENGINE_VERSION,
        "total_patterns": len(patterns),
        "patterns": patterns,
        "sensitivity_profiles": [
            {"name": p.name, "min_confidence": p.min_confidence, "min_matches": p.min_matches}
            for p in SENSITIVITY_PROFILES.values()
        ],
    }


@app.get("/patterns/{pattern_id}")
async def get_pattern(pattern_id: str):
    category = catalog.get(pattern_id.upper())
    if category is None:
        raise HTTPException(404, f"Unknown pattern: {pattern_id}")
    return next(d for d in catalog.describe() if d["id"] == category.id.value)


@app.get("/stats", response_model=StatsResponse)
async def get_stats():
    return scan_stats.snapshot


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": __version__,
        "engine_version": settings.ENGINE_VERSION,
        "categories": len(catalog),
        "default_sensitivity": settings.DEFAULT_SENSITIVITY,
    }


# --- Security + Version Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-DarkShield-Version"] = __version__
    response.headers["X-Engine-Version"] = settings.ENGINE_VERSION
    response.headers["X-API-Version"] = settings.API_VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Body Size Limit Middleware ---
_MAX_BODY_BYTES = 1_048_576  # 1 MB


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject requests exceeding 1MB."""
    content_length = request.headers.get("content-length")
    if content_length:
        try:
            if int(content_length) > _MAX_BODY_BYTES:
                return JSONResponse(
                    status_code=413,
                    content={"detail": "Request body too large."},
                )
        except ValueError:
            pass  # Malformed content-length; let the framework handle it

    return await call_next(request)


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
