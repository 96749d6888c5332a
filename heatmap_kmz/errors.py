from __future__ import annotations


class HeatmapError(Exception):
    """Base class for failures raised by the heatmap pipeline."""


class EmptyInputError(HeatmapError, ValueError):
    """No points were supplied for a batch."""


class RasterEncodingError(HeatmapError, RuntimeError):
    """The PNG codec could not produce bytes for a single layer."""

    def __init__(self, label: str, reason: str):
        super().__init__(f"Failed to encode layer '{label}': {reason}")
        self.label = label
        self.reason = reason


class ProcessingCancelled(HeatmapError):
    """The caller asked to abort the batch between categories."""
