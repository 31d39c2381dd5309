import logging
import os
from typing import Sequence

import numpy as np
import pytest
from PIL import Image

from iconraster import Icon, SvgPath, ViewBox
from iconraster.rasterizer import BaseSurface, Color

logger = logging.getLogger(__name__)

RED: Color = (255, 0, 0, 255)
BLUE: Color = (0, 128, 255, 255)


def get_fixture(name: str) -> str:
    """Get a fixture by name."""
    return os.path.join(os.path.dirname(__file__), "fixtures", name)


class RecordingSurface(BaseSurface):
    """Surface that records submissions instead of drawing them."""

    def __init__(self, width: int = 100, height: int = 100) -> None:
        super().__init__(width, height)
        self.fills: list[tuple[list[np.ndarray], Color, str]] = []
        self.strokes: list[tuple[list[np.ndarray], Color, float]] = []

    def fill_polygons(
        self,
        polygons: Sequence[np.ndarray],
        color: Color,
        fill_rule: str = "nonzero",
    ) -> None:
        self.fills.append(([np.array(p) for p in polygons], color, fill_rule))

    def stroke_polylines(
        self,
        polylines: Sequence[np.ndarray],
        color: Color,
        width: float,
    ) -> None:
        self.strokes.append(([np.array(p) for p in polylines], color, width))

    def to_image(self) -> Image.Image:
        return Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))


@pytest.fixture
def square_icon() -> Icon:
    """10x10 viewbox fully covered by one blue square."""
    return Icon(ViewBox(0, 0, 10, 10), paths=[SvgPath("M0 0 H10 V10 H0 Z", fill=BLUE)])


@pytest.fixture
def left_half_icon() -> Icon:
    """10x10 viewbox with a red path over its left half."""
    return Icon(ViewBox(0, 0, 10, 10), paths=[SvgPath("M0 0 H5 V10 H0 Z", fill=RED)])
