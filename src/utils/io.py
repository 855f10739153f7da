from __future__ import annotations

import io as _io
from typing import Iterable

import pandas as pd

from src.core.schemas import ScanResult
from src.services.history_service import highest_risk


HISTORY_COLUMNS = ["scan_id", "timestamp", "condition", "risk", "label", "confidence", "headline_risk"]


def scans_to_dataframe(scans: Iterable[ScanResult]) -> pd.DataFrame:
    """One row per condition, scans kept in the order given."""
    rows = []
    for scan in scans:
        top = highest_risk(scan)
        for c in scan.conditions:
            rows.append({
                "scan_id": str(scan.id),
                "timestamp": scan.timestamp.isoformat(),
                "condition": c.name,
                "risk": c.risk.value,
                "label": c.risk.label,
                "confidence": round(c.confidence, 4),
                "headline_risk": top.risk.label,
            })
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def dataframe_to_excel_bytes(df: pd.DataFrame) -> bytes:
    buf = _io.BytesIO()
    df.to_excel(buf, index=False)
    return buf.getvalue()


def dataframe_to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")
