"""Scan pipeline exceptions."""

from __future__ import annotations


class ScanError(RuntimeError):
    """Base class for errors raised by the scan pipeline."""


class ImageDecodeFailure(ScanError):
    """Raised when the supplied bytes cannot be decoded as an image.

    Fatal to the scan attempt: no ScanResult exists and nothing is persisted.
    """


class ClassifierError(ScanError):
    """Base class for failures of the external classifier adapter."""


class ModelUnavailable(ClassifierError):
    """Raised when no classifier model is loaded or reachable."""


class InferenceFailure(ClassifierError):
    """Raised when the classifier ran but produced no usable output."""


class ScanNotFound(ScanError, KeyError):
    def __init__(self, scan_id) -> None:
        super().__init__(f"Scan {scan_id} not found")
        self.scan_id = scan_id

    def __str__(self) -> str:
        return self.args[0]
