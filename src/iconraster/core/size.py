"""Output size policies.

A size policy says how the output resolution is derived from the icon's
viewbox. It replaces the convention of passing ``-1`` for "unspecified".
"""

import logging
import math
from dataclasses import dataclass
from typing import Union

from iconraster.errors import DegenerateGeometryError

logger = logging.getLogger(__name__)


def _check_extent(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise DegenerateGeometryError(f"Invalid {name}: {value}")


@dataclass(frozen=True)
class Natural:
    """Use the viewbox size on both axes."""

    def resolve(self, viewbox) -> tuple[float, float]:
        _check_extent("viewbox width", viewbox.width)
        _check_extent("viewbox height", viewbox.height)
        return viewbox.width, viewbox.height


@dataclass(frozen=True)
class FixedWidth:
    """Fixed width, height derived from the viewbox aspect ratio."""

    width: float

    def resolve(self, viewbox) -> tuple[float, float]:
        _check_extent("width", self.width)
        _check_extent("viewbox width", viewbox.width)
        _check_extent("viewbox height", viewbox.height)
        return self.width, viewbox.height * (self.width / viewbox.width)


@dataclass(frozen=True)
class FixedHeight:
    """Fixed height, width derived from the viewbox aspect ratio."""

    height: float

    def resolve(self, viewbox) -> tuple[float, float]:
        _check_extent("height", self.height)
        _check_extent("viewbox width", viewbox.width)
        _check_extent("viewbox height", viewbox.height)
        return viewbox.width * (self.height / viewbox.height), self.height


@dataclass(frozen=True)
class Fixed:
    """Explicit width and height; the icon is stretched to fit."""

    width: float
    height: float

    def resolve(self, viewbox) -> tuple[float, float]:
        _check_extent("width", self.width)
        _check_extent("height", self.height)
        return self.width, self.height


SizePolicy = Union[Natural, FixedWidth, FixedHeight, Fixed]


def size_from_sentinel(viewbox, width: float, height: float) -> SizePolicy:
    """Translate the ``-1`` convention into a size policy.

    A width below 1 means the viewbox width. A height below 1 means the
    height that keeps the viewbox aspect ratio at the chosen width. A given
    height with an unspecified width stretches the viewbox width to it.
    """
    width_set = width >= 1
    height_set = height >= 1
    if width_set and height_set:
        return Fixed(width, height)
    if width_set:
        return FixedWidth(width)
    if height_set:
        return Fixed(viewbox.width, height)
    return Natural()


def to_pixels(width: float, height: float) -> tuple[int, int]:
    """Truncate a resolved size toward zero.

    Raises:
        DegenerateGeometryError: If either axis truncates to zero pixels.
    """
    pixel_width = int(width)
    pixel_height = int(height)
    if pixel_width <= 0 or pixel_height <= 0:
        raise DegenerateGeometryError(
            f"Resolved size {width}x{height} is smaller than one pixel"
        )
    return pixel_width, pixel_height
