#!/usr/bin/env python3
import argparse
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Ensure local imports work when run from repo root
import sys
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.core.config import settings
from src.core.schemas import ConditionResult, RiskLevel, ScanResult
from src.services.store_service import JsonFileScanStore


# (days ago, [(condition, risk, confidence), ...])
SAMPLE_SCANS = [
    (1, [
        ("Calculus", RiskLevel.Low, 0.85),
        ("Caries", RiskLevel.Medium, 0.72),
        ("Gingivitis", RiskLevel.Low, 0.91),
    ]),
    (2, [
        ("Tooth Discoloration", RiskLevel.Medium, 0.68),
        ("Mouth Ulcer", RiskLevel.Low, 0.95),
    ]),
    (3, [
        ("Hypodontia", RiskLevel.Low, 0.88),
    ]),
]


def build_sample_scans(now: datetime) -> list[ScanResult]:
    return [
        ScanResult(
            timestamp=now - timedelta(days=days),
            conditions=[ConditionResult(name=n, risk=r, confidence=c) for n, r, c in conds],
        )
        for days, conds in SAMPLE_SCANS
    ]


def main() -> int:
    ap = argparse.ArgumentParser(description="Load demo scans into the json store")
    ap.add_argument("--data-dir", default=settings.data_dir)
    args = ap.parse_args()

    store = JsonFileScanStore(args.data_dir)
    scans = build_sample_scans(datetime.now(timezone.utc))
    for scan in scans:
        store.insert(scan)
    print(f"Inserted {len(scans)} sample scans into {args.data_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
