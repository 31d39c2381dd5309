"""Pillow-based drawing surface.

Polygons and polylines are drawn into an ``L`` mode coverage mask at
``supersample`` times the output resolution, box-filtered back down, and
alpha-composited onto the RGBA buffer. Only the clipped bounding box of each
submission is allocated.
"""

import logging
import math
from typing import Any, Optional, Sequence

import numpy as np
from PIL import Image, ImageChops, ImageDraw

from .base_rasterizer import BaseSurface, Color

logger = logging.getLogger(__name__)

FILL_RULES = ("nonzero", "evenodd")


class PillowSurface(BaseSurface):
    """Anti-aliased surface using PIL.ImageDraw.

    Note:
        The ``nonzero`` rule is drawn as the union of all subpaths, so holes
        drawn with opposite winding are filled. Use ``evenodd`` for shapes
        with holes.

    Example:
        >>> surface = PillowSurface(64, 64, supersample=4)
        >>> surface.fill_polygons([np.array([[0, 0], [64, 0], [64, 64]])], (255, 0, 0, 255))
        >>> image = surface.to_image()
    """

    def __init__(self, width: int, height: int, supersample: int = 4) -> None:
        """Initialize the surface.

        Args:
            width: Output width in pixels.
            height: Output height in pixels.
            supersample: Mask resolution multiplier per axis. 1 disables
                anti-aliasing.
        """
        super().__init__(width, height)
        if supersample < 1:
            raise ValueError(f"supersample must be >= 1, got {supersample}")
        self.supersample = int(supersample)
        self._image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    def fill_polygons(
        self,
        polygons: Sequence[np.ndarray],
        color: Color,
        fill_rule: str = "nonzero",
    ) -> None:
        if fill_rule not in FILL_RULES:
            raise ValueError(f"Unsupported fill rule: {fill_rule}")
        polygons = [_check_points(p) for p in polygons]
        polygons = [p for p in polygons if len(p) >= 3]
        if not polygons or color[3] <= 0:
            return
        bbox = self._clip_bbox(np.concatenate(polygons), margin=0.0)
        if bbox is None:
            return

        mask = self._new_mask(bbox)
        for points in polygons:
            xy = self._to_mask_coords(points, bbox)
            if fill_rule == "evenodd":
                layer = self._new_mask(bbox)
                ImageDraw.Draw(layer).polygon(xy, fill=255)
                mask = ImageChops.difference(mask, layer)
            else:
                ImageDraw.Draw(mask).polygon(xy, fill=255)
        self._composite(mask, bbox, color)

    def stroke_polylines(
        self,
        polylines: Sequence[np.ndarray],
        color: Color,
        width: float,
    ) -> None:
        polylines = [_check_points(p) for p in polylines]
        polylines = [p for p in polylines if len(p) >= 2]
        if not polylines or color[3] <= 0 or width <= 0:
            return
        bbox = self._clip_bbox(np.concatenate(polylines), margin=width / 2.0)
        if bbox is None:
            return

        mask = self._new_mask(bbox)
        draw = ImageDraw.Draw(mask)
        line_width = max(1, int(round(width * self.supersample)))
        for points in polylines:
            draw.line(self._to_mask_coords(points, bbox), fill=255, width=line_width, joint="curve")
        self._composite(mask, bbox, color)

    def to_image(self) -> Image.Image:
        return self._image

    def _clip_bbox(
        self, points: np.ndarray, margin: float
    ) -> Optional[tuple[int, int, int, int]]:
        x0 = max(0, math.floor(points[:, 0].min() - margin))
        y0 = max(0, math.floor(points[:, 1].min() - margin))
        x1 = min(self.width, math.ceil(points[:, 0].max() + margin) + 1)
        y1 = min(self.height, math.ceil(points[:, 1].max() + margin) + 1)
        if x1 <= x0 or y1 <= y0:
            return None
        return x0, y0, x1, y1

    def _new_mask(self, bbox: tuple[int, int, int, int]) -> Image.Image:
        x0, y0, x1, y1 = bbox
        size = ((x1 - x0) * self.supersample, (y1 - y0) * self.supersample)
        return Image.new("L", size, 0)

    def _to_mask_coords(
        self, points: np.ndarray, bbox: tuple[int, int, int, int]
    ) -> list[tuple[float, float]]:
        offset = np.array([bbox[0], bbox[1]], dtype=np.float64)
        scaled = (points - offset) * self.supersample
        return [(float(x), float(y)) for x, y in scaled]

    def _composite(
        self, mask: Image.Image, bbox: tuple[int, int, int, int], color: Color
    ) -> None:
        x0, y0, x1, y1 = bbox
        if self.supersample > 1:
            mask = mask.resize((x1 - x0, y1 - y0), Image.Resampling.BOX)
        coverage = np.asarray(mask, dtype=np.float32)
        alpha = np.clip(np.rint(coverage * (color[3] / 255.0)), 0, 255).astype(np.uint8)
        layer = Image.new("RGBA", (x1 - x0, y1 - y0), tuple(color[:3]) + (0,))
        layer.putalpha(Image.fromarray(alpha))
        self._image.alpha_composite(layer, dest=(x0, y0))


def _check_points(points: np.ndarray) -> np.ndarray:
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if not np.all(np.isfinite(points)):
        raise ValueError("Geometry contains non-finite coordinates")
    return points


def create_surface(width: int, height: int, **kwargs: Any) -> BaseSurface:
    """Create the default drawing surface.

    Args:
        width: Output width in pixels.
        height: Output height in pixels.
        **kwargs: Passed to PillowSurface (e.g. ``supersample``).
    """
    return PillowSurface(width, height, **kwargs)
