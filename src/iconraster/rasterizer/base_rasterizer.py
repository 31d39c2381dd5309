import logging
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

Color = tuple[int, int, int, int]


class BaseSurface(ABC):
    """Base class for drawing surfaces.

    A surface accumulates transformed path geometry in pixel space and
    produces an RGBA image of exactly ``width`` x ``height`` pixels. Every
    pixel starts fully transparent; submissions are composited in call order.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    @abstractmethod
    def fill_polygons(
        self,
        polygons: Sequence[np.ndarray],
        color: Color,
        fill_rule: str = "nonzero",
    ) -> None:
        """Fill a set of closed polygons as one shape.

        Args:
            polygons: ``(N, 2)`` arrays of pixel coordinates, one per subpath.
            color: Straight RGBA color; alpha already includes opacity.
            fill_rule: ``"nonzero"`` or ``"evenodd"``.
        """
        raise NotImplementedError

    @abstractmethod
    def stroke_polylines(
        self,
        polylines: Sequence[np.ndarray],
        color: Color,
        width: float,
    ) -> None:
        """Stroke a set of polylines with the given line width in pixels."""
        raise NotImplementedError

    @abstractmethod
    def to_image(self) -> Image.Image:
        """Return the accumulated pixels as an RGBA image."""
        raise NotImplementedError
