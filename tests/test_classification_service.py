"""
Unit tests for ClassificationOrchestrator.

The classifier is replaced with in-process adapters; no model server is needed.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from src.core.errors import ImageDecodeFailure, InferenceFailure, ModelUnavailable
from src.core.schemas import RiskLevel
from src.services.classification_service import ClassificationOrchestrator, scan_and_store
from src.services.classifier_adapters import StaticClassifier, UnavailableClassifier
from src.services.store_service import InMemoryScanStore

from conftest import FALLBACK_SIGNATURE, signature


FIXED_NOW = datetime(2026, 10, 15, 9, 30, tzinfo=timezone.utc)


class RaisingClassifier:
    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    def classify(self, image):
        self.calls += 1
        raise self.exc


class RecordingClassifier(StaticClassifier):
    def __init__(self, predictions):
        super().__init__(predictions)
        self.images = []

    def classify(self, image):
        self.images.append(image)
        return super().classify(image)


def _orchestrator(classifier):
    return ClassificationOrchestrator(classifier, clock=lambda: FIXED_NOW)


# =============================================================================
# Test: successful classification
# =============================================================================

class TestRunSuccess:
    def test_maps_classifier_output(self, png_bytes):
        scan = _orchestrator(StaticClassifier([("caries_v2", 0.8), ("gingivitis_x", 0.85)])).run_sync(png_bytes)
        assert signature(scan.conditions) == [
            ("Caries", RiskLevel.High, 0.8),
            ("Gingivitis", RiskLevel.High, 0.85),
        ]
        assert scan.timestamp == FIXED_NOW
        assert scan.image_bytes == png_bytes

    def test_adapter_receives_decoded_rgb_image(self, png_bytes):
        clf = RecordingClassifier([("calculus", 0.4)])
        _orchestrator(clf).run_sync(png_bytes)
        assert len(clf.images) == 1
        assert clf.images[0].mode == "RGB"
        assert clf.images[0].size == (32, 24)

    def test_nothing_matched_uses_fallback(self, png_bytes):
        scan = _orchestrator(StaticClassifier([("background", 0.97)])).run_sync(png_bytes)
        assert signature(scan.conditions) == FALLBACK_SIGNATURE

    def test_empty_output_uses_fallback(self, png_bytes):
        scan = _orchestrator(StaticClassifier([])).run_sync(png_bytes)
        assert signature(scan.conditions) == FALLBACK_SIGNATURE

    def test_awaitable(self, png_bytes):
        orch = _orchestrator(StaticClassifier([("ulcer", 0.9)]))
        scan = asyncio.run(orch.run(png_bytes))
        assert signature(scan.conditions) == [("Mouth Ulcer", RiskLevel.Medium, 0.9)]


# =============================================================================
# Test: classifier failures are absorbed
# =============================================================================

class TestRunClassifierFailure:
    def test_inference_failure_keeps_image(self, png_bytes):
        clf = RaisingClassifier(InferenceFailure("boom"))
        scan = _orchestrator(clf).run_sync(png_bytes)
        assert clf.calls == 1
        assert scan.image_bytes == png_bytes
        assert signature(scan.conditions) == FALLBACK_SIGNATURE

    def test_model_unavailable(self, png_bytes):
        scan = _orchestrator(UnavailableClassifier()).run_sync(png_bytes)
        assert scan.image_bytes == png_bytes
        assert signature(scan.conditions) == FALLBACK_SIGNATURE

    def test_unexpected_adapter_error(self, png_bytes):
        scan = _orchestrator(RaisingClassifier(RuntimeError("driver crashed"))).run_sync(png_bytes)
        assert signature(scan.conditions) == FALLBACK_SIGNATURE

    @pytest.mark.parametrize("predictions", [
        [("caries", "high")],
        [("caries",)],
        [("caries", None)],
        None,
    ])
    def test_malformed_output_uses_fallback(self, png_bytes, predictions):
        class MalformedClassifier:
            def classify(self, image):
                return predictions

        scan = _orchestrator(MalformedClassifier()).run_sync(png_bytes)
        assert scan.image_bytes == png_bytes
        assert signature(scan.conditions) == FALLBACK_SIGNATURE

    def test_never_empty(self, png_bytes):
        for clf in (StaticClassifier([]), UnavailableClassifier(), RaisingClassifier(ModelUnavailable("x"))):
            assert len(_orchestrator(clf).run_sync(png_bytes).conditions) > 0


# =============================================================================
# Test: decode failure
# =============================================================================

class TestRunDecodeFailure:
    @pytest.mark.parametrize("payload", [b"", b"not an image", b"\x89PNG\r\n\x1a\ntruncated"])
    def test_raises_before_classifier(self, payload):
        clf = RecordingClassifier([("caries", 0.9)])
        with pytest.raises(ImageDecodeFailure):
            _orchestrator(clf).run_sync(payload)
        assert clf.images == []

    def test_nothing_persisted(self):
        store = InMemoryScanStore()
        orch = _orchestrator(StaticClassifier([("caries", 0.9)]))
        with pytest.raises(ImageDecodeFailure):
            asyncio.run(scan_and_store(orch, store, b"garbage"))
        assert store.list_all() == []


class TestScanAndStore:
    def test_inserts_result(self, png_bytes):
        store = InMemoryScanStore()
        orch = _orchestrator(UnavailableClassifier())
        scan = asyncio.run(scan_and_store(orch, store, png_bytes))
        assert store.list_all() == [scan]
        assert store.get(scan.id).image_bytes == png_bytes
