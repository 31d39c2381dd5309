"""Exceptions raised by the rendering pipeline.

Each failure kind has its own class so that callers can tell a degenerate
icon from a failed path, a failed write or a codec error.
"""

from typing import Optional


class IconRasterError(Exception):
    """Base class for all iconraster errors."""


class DegenerateGeometryError(IconRasterError, ValueError):
    """Viewbox or target size cannot produce a finite, invertible transform."""


class ResourceLimitError(IconRasterError, ValueError):
    """Requested image exceeds the configured resource limits."""


class PathRenderError(IconRasterError, RuntimeError):
    """A single path could not be rasterized.

    Args:
        message: Human readable reason.
        index: Position of the path in the icon, when known.
        path_id: The path ``id`` attribute, when known.
    """

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        path_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.path_id = path_id


class FileIOError(IconRasterError, OSError):
    """Creating, writing or flushing the destination file failed.

    ``stage`` is one of ``"create"``, ``"write"`` or ``"flush"``.
    """

    def __init__(self, message: str, stage: str, filepath: str) -> None:
        super().__init__(message)
        self.stage = stage
        self.filepath = filepath


class EncodeError(IconRasterError, ValueError):
    """The image codec rejected the pixel buffer."""

    def __init__(self, message: str, format: str) -> None:
        super().__init__(message)
        self.format = format
