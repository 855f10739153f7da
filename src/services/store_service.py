from __future__ import annotations

import json
import threading
import uuid
from pathlib import Path
from typing import Protocol

from src.core.config import settings
from src.core.errors import ScanNotFound
from src.core.schemas import ScanResult
from src.utils.logger import get_logger


log = get_logger(__name__)


class ScanRecordStore(Protocol):
    """Append-only, delete-by-id persistence for finished scans. No updates."""

    def insert(self, scan: ScanResult) -> None: ...

    def list_all(self) -> list[ScanResult]: ...

    def get(self, scan_id: uuid.UUID) -> ScanResult: ...

    def delete(self, scan_id: uuid.UUID) -> None: ...


def _newest_first(scans) -> list[ScanResult]:
    return sorted(scans, key=lambda s: s.timestamp, reverse=True)


class InMemoryScanStore:
    def __init__(self):
        self._scans: dict[uuid.UUID, ScanResult] = {}
        self._lock = threading.RLock()

    def insert(self, scan: ScanResult) -> None:
        with self._lock:
            if scan.id in self._scans:
                raise ValueError(f"Scan {scan.id} already stored")
            self._scans[scan.id] = scan
        log.debug("Inserted scan %s", scan.id)

    def list_all(self) -> list[ScanResult]:
        with self._lock:
            return _newest_first(self._scans.values())

    def get(self, scan_id: uuid.UUID) -> ScanResult:
        with self._lock:
            try:
                return self._scans[scan_id]
            except KeyError:
                raise ScanNotFound(scan_id) from None

    def delete(self, scan_id: uuid.UUID) -> None:
        with self._lock:
            if self._scans.pop(scan_id, None) is None:
                raise ScanNotFound(scan_id)
        log.debug("Deleted scan %s", scan_id)


class JsonFileScanStore(InMemoryScanStore):
    """
    Directory-backed store.

    Layout:
      <root>/scans.json        list of scan records without image data
      <root>/images/<id>.bin   original capture bytes, when present

    The whole index is loaded on construction and rewritten on every mutation.
    """

    INDEX_NAME = "scans.json"

    def __init__(self, root: str | Path):
        super().__init__()
        self.root = Path(root)
        self.images_dir = self.root / "images"
        self.images_dir.mkdir(parents=True, exist_ok=True)
        self.index_path = self.root / self.INDEX_NAME
        self._load()

    def _image_path(self, scan_id: uuid.UUID) -> Path:
        return self.images_dir / f"{scan_id}.bin"

    def _load(self) -> None:
        if not self.index_path.exists():
            return
        rows = json.loads(self.index_path.read_text(encoding="utf-8"))
        for row in rows:
            scan = ScanResult.model_validate(row)
            img_path = self._image_path(scan.id)
            if row.get("has_image") and img_path.exists():
                scan = scan.model_copy(update={"image_bytes": img_path.read_bytes()})
            self._scans[scan.id] = scan
        log.debug("Loaded %d scans from %s", len(self._scans), self.index_path)

    def _flush(self) -> None:
        rows = []
        for scan in _newest_first(self._scans.values()):
            row = scan.model_dump(mode="json")
            row["has_image"] = scan.has_image
            rows.append(row)
        tmp = self.index_path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.index_path)

    def insert(self, scan: ScanResult) -> None:
        with self._lock:
            super().insert(scan)
            if scan.image_bytes is not None:
                self._image_path(scan.id).write_bytes(scan.image_bytes)
            self._flush()

    def delete(self, scan_id: uuid.UUID) -> None:
        with self._lock:
            super().delete(scan_id)
            self._image_path(scan_id).unlink(missing_ok=True)
            self._flush()


def get_store(backend: str | None = None, data_dir: str | None = None) -> ScanRecordStore:
    kind = (backend or settings.store_backend).lower()
    if kind == "memory":
        return InMemoryScanStore()
    if kind == "json":
        return JsonFileScanStore(data_dir or settings.data_dir)
    raise ValueError(f"Unknown store backend: {kind!r}. Use 'json' or 'memory'.")
