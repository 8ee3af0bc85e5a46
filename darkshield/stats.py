"""
Scan Statistics

In-memory counters for scans served by the API: total scans, total
findings, phishing detections and the set of distinct sites seen.
Thread-safe via asyncio lock.

Usage:
    from darkshield.stats import scan_stats
    await scan_stats.record_scan("example.com", findings=3)
    await scan_stats.record_phishing("amaz0n.com")
    scan_stats.snapshot
"""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from typing import Optional


class ScanStats:
    """Process-local scan counters."""

    def __init__(self, max_sites: int = 10_000):
        self._lock = asyncio.Lock()
        self._max_sites = max_sites
        self._sites: OrderedDict[str, float] = OrderedDict()
        self._total_scans = 0
        self._total_findings = 0
        self._phishing_detections = 0
        self._started = time.monotonic()

    def _touch_site(self, host: Optional[str]) -> None:
        if not host:
            return
        if host in self._sites:
            # Most recently seen goes last
            self._sites.move_to_end(host)
        elif len(self._sites) >= self._max_sites:
            self._sites.popitem(last=False)
        self._sites[host] = time.monotonic()

    async def record_scan(self, host: Optional[str], findings: int) -> None:
        async with self._lock:
            self._total_scans += 1
            self._total_findings += max(0, findings)
            self._touch_site(host)

    async def record_phishing(self, host: Optional[str]) -> None:
        async with self._lock:
            self._phishing_detections += 1
            self._touch_site(host)

    async def reset(self) -> None:
        async with self._lock:
            self._sites.clear()
            self._total_scans = 0
            self._total_findings = 0
            self._phishing_detections = 0
            self._started = time.monotonic()

    @property
    def snapshot(self) -> dict:
        return {
            "total_scans": self._total_scans,
            "total_findings": self._total_findings,
            "phishing_detections": self._phishing_detections,
            "sites_scanned": len(self._sites),
            "uptime_seconds": round(time.monotonic() - self._started, 1),
        }


# Singleton — shared across the application
scan_stats = ScanStats()
