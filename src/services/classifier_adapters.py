from __future__ import annotations

from typing import Iterable, Optional, Protocol

import requests
from PIL import Image

from src.core.config import settings
from src.core.errors import InferenceFailure, ModelUnavailable
from src.core.schemas import RawPrediction
from src.services.image_service import image_to_png_bytes


class ClassifierAdapter(Protocol):
    """External image classifier boundary.

    ``classify`` returns raw (label, score) pairs in the model's ranking order
    and may raise ModelUnavailable or InferenceFailure.
    """

    def classify(self, image: Image.Image) -> list[RawPrediction]: ...


class UnavailableClassifier:
    """Stand-in used when no model is configured; every call fails."""

    def __init__(self, reason: str = "The dental classification model could not be loaded"):
        self.reason = reason

    def classify(self, image: Image.Image) -> list[RawPrediction]:
        raise ModelUnavailable(self.reason)


class StaticClassifier:
    """Returns the same predictions for every image."""

    def __init__(self, predictions: Iterable[tuple[str, float]]):
        self.predictions = [RawPrediction(str(label), float(score)) for label, score in predictions]

    def classify(self, image: Image.Image) -> list[RawPrediction]:
        return list(self.predictions)


def _parse_predictions(data) -> list[RawPrediction]:
    items = data.get("predictions") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise InferenceFailure("Invalid results returned from the model")
    out: list[RawPrediction] = []
    for it in items:
        try:
            if isinstance(it, dict):
                label = it.get("label", it.get("identifier"))
                score = it.get("score", it.get("confidence"))
            else:
                label, score = it
            out.append(RawPrediction(str(label), float(score)))
        except (TypeError, ValueError) as e:
            raise InferenceFailure(f"Invalid prediction entry: {it!r}") from e
    return out


class RemoteClassifier:
    """Posts the decoded image as PNG to a model server.

    Expected response: ``{"predictions": [{"label": str, "score": float}, ...]}``
    or a bare list of the same entries.
    """

    def __init__(self, url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def classify(self, image: Image.Image) -> list[RawPrediction]:
        files = {"image": ("scan.png", image_to_png_bytes(image), "image/png")}
        try:
            resp = self.session.post(self.url, files=files, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ModelUnavailable(f"Classifier unreachable at {self.url}: {e}") from e
        if resp.status_code == 503:
            raise ModelUnavailable(f"Classifier at {self.url} reports no model loaded")
        try:
            resp.raise_for_status()
            data = resp.json()
        except (requests.HTTPError, ValueError) as e:
            raise InferenceFailure(f"Classifier request failed: {e}") from e
        return _parse_predictions(data)


def get_classifier(url: Optional[str] = None, timeout: Optional[float] = None) -> ClassifierAdapter:
    target = url or settings.classifier_url
    if not target:
        return UnavailableClassifier("No CLASSIFIER_URL configured")
    return RemoteClassifier(target, timeout=timeout or settings.classifier_timeout)
