from __future__ import annotations

import asyncio
from concurrent.futures import Executor
from datetime import datetime, timezone
from typing import Callable, Optional

from langsmith import traceable
from PIL import Image

from src.core.errors import ClassifierError, InferenceFailure
from src.core.schemas import ConditionResult, RawPrediction, ScanResult
from src.services.classifier_adapters import ClassifierAdapter, get_classifier
from src.services.fallback_service import apply_fallback, default_conditions
from src.services.image_service import decode_image
from src.services.mapping_service import map_predictions
from src.services.store_service import ScanRecordStore
from src.utils.logger import get_logger


log = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@traceable
def classify_image(classifier: ClassifierAdapter, image: Image.Image) -> list[RawPrediction]:
    """Call the adapter; anything that is not already a ClassifierError becomes an InferenceFailure.

    Entries are normalised to RawPrediction here, so malformed output counts as a failed inference.
    """
    try:
        return [RawPrediction(str(label), float(score)) for label, score in classifier.classify(image)]
    except ClassifierError:
        raise
    except Exception as e:
        raise InferenceFailure(f"Classifier raised {type(e).__name__}: {e}") from e


class ClassificationOrchestrator:
    """
    Drives one scan from raw bytes to a finished ScanResult.

    Failure policy lives here and only here:
    1) undecodable bytes -> ImageDecodeFailure propagates, no ScanResult;
    2) classifier failure -> default condition set, image kept;
    3) classifier success -> mapped conditions, default set if none matched.
    """

    def __init__(
        self,
        classifier: Optional[ClassifierAdapter] = None,
        clock: Callable[[], datetime] = _utcnow,
        executor: Optional[Executor] = None,
    ):
        self.classifier = classifier if classifier is not None else get_classifier()
        self.clock = clock
        self.executor = executor

    async def run(self, image_bytes: bytes) -> ScanResult:
        image = decode_image(image_bytes)
        conditions = await self._resolve_conditions(image)
        return ScanResult(timestamp=self.clock(), conditions=conditions, image_bytes=image_bytes)

    def run_sync(self, image_bytes: bytes) -> ScanResult:
        return asyncio.run(self.run(image_bytes))

    async def _resolve_conditions(self, image: Image.Image) -> list[ConditionResult]:
        # The adapter runs on a worker thread; its completion resolves a single
        # future and everything after the await is back on the event loop.
        loop = asyncio.get_running_loop()
        try:
            raw = await loop.run_in_executor(self.executor, classify_image, self.classifier, image)
        except ClassifierError as e:
            log.warning("Classification failed, using default conditions: %s", e)
            return default_conditions()

        mapped = map_predictions(raw)
        if not mapped:
            log.info("No recognised conditions in %d raw predictions, using default conditions", len(raw))
        return apply_fallback(mapped)


async def scan_and_store(
    orchestrator: ClassificationOrchestrator,
    store: ScanRecordStore,
    image_bytes: bytes,
) -> ScanResult:
    """Run one scan and persist it. Decode failures propagate before anything is stored."""
    scan = await orchestrator.run(image_bytes)
    store.insert(scan)
    log.info("Stored scan %s with %d conditions", scan.id, len(scan.conditions))
    return scan
