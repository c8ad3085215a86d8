"""
Shared fixtures for the alias scanner tests.
"""

import os

# Qt must not look for a display when pytest-qt creates the application
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import List
from unittest.mock import MagicMock

import numpy as np
import pytest
import requests

from alias_scanner.core.interfaces.code_detector_interface import (
    CodeKind,
    DetectedCode,
    ICodeDetector,
    NormalizedRect
)
from alias_scanner.core.pipeline.clock import Clock


class FakeClock(Clock):
    """Clock whose time only moves when a test sets it."""

    def __init__(self, start: float = 0.0):
        self.time = start

    def now(self) -> float:
        return self.time


class ScriptedDetector(ICodeDetector):
    """Detector returning whatever `codes` holds; records every call."""

    def __init__(self):
        self.codes: List[DetectedCode] = []
        self.calls = 0
        self.error = None

    def detect(self, image: np.ndarray) -> List[DetectedCode]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.codes)


class ImmediateExecutor:
    """Executor stand-in running submitted work on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        fn(*args, **kwargs)

    def shutdown(self, wait: bool = True):
        pass


def makeCode(payload: str, kind: CodeKind = CodeKind.BARCODE) -> DetectedCode:
    return DetectedCode(
        kind=kind,
        payload=payload,
        boundingBox=NormalizedRect(0.25, 0.25, 0.5, 0.5),
        symbology="QRCode" if kind is CodeKind.QR else "EAN13"
    )


def makeQr(payload: str) -> DetectedCode:
    return makeCode(payload, CodeKind.QR)


@pytest.fixture
def fakeClock():
    return FakeClock()


@pytest.fixture
def detector():
    return ScriptedDetector()


@pytest.fixture
def frame():
    return np.zeros((100, 200, 3), dtype=np.uint8)


def makeResponse(statusCode: int = 200, body=None, text: str = "") -> MagicMock:
    """requests.Response stand-in; `body=ValueError` makes .json() fail."""
    response = MagicMock(spec=requests.Response)
    response.status_code = statusCode
    response.text = text
    if body is ValueError:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response
