import io
import os
from datetime import datetime, timezone

# Keep the module-level app off the filesystem during tests.
os.environ.setdefault("DENTSCAN_STORE", "memory")

import pytest
from PIL import Image

from src.core.schemas import ConditionResult, RiskLevel, ScanResult


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (32, 24), color=(220, 200, 180)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def make_scan(timestamp: datetime, *conditions, image_bytes=None) -> ScanResult:
    """Build a scan from (name, risk, confidence) triples."""
    if not conditions:
        conditions = (("Caries", RiskLevel.Low, 0.2),)
    return ScanResult(
        timestamp=timestamp,
        conditions=[ConditionResult(name=n, risk=r, confidence=c) for n, r, c in conditions],
        image_bytes=image_bytes,
    )


def signature(conditions):
    return [(c.name, c.risk, c.confidence) for c in conditions]


FALLBACK_SIGNATURE = [
    ("Calculus", RiskLevel.Low, 0.30),
    ("Caries", RiskLevel.Low, 0.20),
    ("Gingivitis", RiskLevel.Low, 0.25),
    ("Tooth Discoloration", RiskLevel.Low, 0.35),
    ("Mouth Ulcer", RiskLevel.Low, 0.10),
    ("Hypodontia", RiskLevel.Low, 0.15),
]
