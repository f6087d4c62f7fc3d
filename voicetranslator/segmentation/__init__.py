"""Segmentation of streaming recognition fragments into transcript lines."""

from .buffer import DualBuffer
from .engine import SegmentationEngine, PAUSE_THRESHOLD_MS
from .async_engine import AsyncSegmentationEngine
from ..exceptions import InvalidStateError

__all__ = [
    "DualBuffer",
    "SegmentationEngine",
    "AsyncSegmentationEngine",
    "PAUSE_THRESHOLD_MS",
    "InvalidStateError",
]
