from __future__ import annotations

import uuid
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, File, UploadFile, HTTPException, Query, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse

from src.core.config import settings
from src.core.errors import ImageDecodeFailure, ScanNotFound
from src.core.schemas import TimeWindow
from src.api.schemas import (
    HealthResponse,
    HistorySummaryResponse,
    ScanDetail,
    ScanListResponse,
    ScanSummary,
)
from src.services.classification_service import ClassificationOrchestrator
from src.services.history_service import (
    filter_by_window,
    format_health_score,
    health_score,
    monthly_count,
)
from src.services.store_service import ScanRecordStore
from src.utils.io import dataframe_to_csv_bytes, dataframe_to_excel_bytes, scans_to_dataframe
from src.utils.logger import get_logger


log = get_logger(__name__)

router = APIRouter()


def _store(request: Request) -> ScanRecordStore:
    return request.app.state.store


def _orchestrator(request: Request) -> ClassificationOrchestrator:
    return request.app.state.orchestrator


def _resolve_now(now: datetime | None) -> datetime:
    tz = ZoneInfo(settings.timezone)
    if now is None:
        return datetime.now(tz)
    return now if now.tzinfo is not None else now.replace(tzinfo=tz)


def _get_scan(request: Request, scan_id: uuid.UUID):
    try:
        return _store(request).get(scan_id)
    except ScanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse(status="ok")


@router.post("/scans", response_model=ScanDetail, status_code=201)
async def create_scan(request: Request, image: UploadFile = File(...)) -> ScanDetail:
    content = await image.read()
    try:
        scan = await _orchestrator(request).run(content)
    except ImageDecodeFailure as e:
        log.info("Rejected upload %r: %s", image.filename, e)
        raise HTTPException(status_code=422, detail=str(e))
    # file-backed stores write to disk; keep that off the event loop
    await run_in_threadpool(_store(request).insert, scan)
    log.info("Stored scan %s with %d conditions", scan.id, len(scan.conditions))
    return ScanDetail.from_scan(scan)


@router.get("/scans", response_model=ScanListResponse)
def list_scans(
    request: Request,
    window: TimeWindow = Query(default=TimeWindow.All),
    now: datetime | None = Query(default=None, description="Reference time for window filtering"),
) -> ScanListResponse:
    scans = filter_by_window(_store(request).list_all(), window, _resolve_now(now))
    return ScanListResponse(window=window, count=len(scans), items=[ScanSummary.from_scan(s) for s in scans])


@router.get("/scans/{scan_id}", response_model=ScanDetail)
def get_scan(request: Request, scan_id: uuid.UUID) -> ScanDetail:
    return ScanDetail.from_scan(_get_scan(request, scan_id))


@router.get("/scans/{scan_id}/image")
def get_scan_image(request: Request, scan_id: uuid.UUID) -> Response:
    scan = _get_scan(request, scan_id)
    if scan.image_bytes is None:
        raise HTTPException(status_code=404, detail=f"Scan {scan_id} has no image")
    return Response(content=scan.image_bytes, media_type="application/octet-stream")


@router.delete("/scans/{scan_id}", status_code=204)
def delete_scan(request: Request, scan_id: uuid.UUID) -> Response:
    try:
        _store(request).delete(scan_id)
    except ScanNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.get("/history/summary", response_model=HistorySummaryResponse)
def history_summary(
    request: Request,
    window: TimeWindow = Query(default=TimeWindow.All),
    now: datetime | None = Query(default=None),
) -> HistorySummaryResponse:
    ref = _resolve_now(now)
    snapshot = _store(request).list_all()
    scans = filter_by_window(snapshot, window, ref)
    score = health_score(scans)
    return HistorySummaryResponse(
        window=window,
        scan_count=len(scans),
        monthly_count=monthly_count(snapshot, ref),
        health_score=score,
        health_score_display=format_health_score(score),
    )


@router.get("/history/export")
def export_history(
    request: Request,
    window: TimeWindow = Query(default=TimeWindow.All),
    now: datetime | None = Query(default=None),
    excel: bool | None = Query(default=False, description="Return Excel file instead of CSV"),
) -> StreamingResponse:
    scans = filter_by_window(_store(request).list_all(), window, _resolve_now(now))
    df = scans_to_dataframe(scans)
    if excel:
        return StreamingResponse(
            iter([dataframe_to_excel_bytes(df)]),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": "attachment; filename=\"scan_history.xlsx\""},
        )
    return StreamingResponse(
        iter([dataframe_to_csv_bytes(df)]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=\"scan_history.csv\""},
    )
