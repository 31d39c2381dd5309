import dataclasses
import logging
import math
from functools import cached_property
from typing import Optional, Union

import numpy as np
from svgpathtools import Arc, CubicBezier, Line, Path, QuadraticBezier, parse_path

from iconraster.core.transform import Affine
from iconraster.errors import PathRenderError
from iconraster.rasterizer import BaseSurface, Color

logger = logging.getLogger(__name__)

# A solid RGBA color, or a paint server reference such as "url(#gradient)".
Paint = Union[Color, str, None]

# Target length in pixels of one flattened curve segment.
FLATTEN_TOLERANCE = 2.0
MAX_CURVE_STEPS = 256


def clamp_opacity(value: float) -> float:
    """Clamp an opacity factor into ``[0.0, 1.0]``.

    Raises:
        ValueError: If value is NaN.
    """
    if math.isnan(value):
        raise ValueError("Opacity must be a number, got NaN")
    clamped = min(1.0, max(0.0, value))
    if clamped != value:
        logger.debug("Clamped opacity %s to %s", value, clamped)
    return clamped


@dataclasses.dataclass
class SvgPath:
    """One drawable path element.

    Geometry is kept as SVG path data and parsed on first use, so malformed
    data is reported when the path is drawn.

    Example::

        path = SvgPath("M0 0 H10 V10 H0 Z", fill=(255, 0, 0, 255))
        path.draw(surface, opacity=1.0, transform=Affine.identity())
    """

    d: str
    fill: Paint = (0, 0, 0, 255)
    stroke: Paint = None
    stroke_width: float = 1.0
    opacity: float = 1.0
    fill_opacity: float = 1.0
    stroke_opacity: float = 1.0
    fill_rule: str = "nonzero"
    transform: Affine = dataclasses.field(default_factory=Affine.identity)
    id: Optional[str] = None

    @cached_property
    def segments(self) -> Path:
        """Parsed path data.

        Raises:
            PathRenderError: If the path data cannot be parsed.
        """
        try:
            return parse_path(self.d)
        except Exception as e:
            # svgpathtools signals bad data with assertions as well as ValueError.
            raise PathRenderError(
                f"Invalid path data {self.d!r}: {e}", path_id=self.id
            ) from e

    def subpaths(self, transform: Affine) -> list[tuple[np.ndarray, bool]]:
        """Flatten the geometry into pixel-space polylines.

        Args:
            transform: Mapping applied after the path's own transform.

        Returns:
            List of ``(points, closed)`` pairs.
        """
        total = transform @ self.transform
        segments = self.segments
        try:
            polylines = _flatten_path(segments, total.scale_factor)
        except PathRenderError as e:
            e.path_id = self.id
            raise
        except Exception as e:
            raise PathRenderError(
                f"Cannot flatten path data {self.d!r}: {e}", path_id=self.id
            ) from e
        return [(total.apply(xy), closed) for xy, closed in polylines]

    def draw(self, surface: BaseSurface, opacity: float, transform: Affine) -> None:
        """Submit the transformed path to the surface.

        Args:
            surface: Drawing surface receiving the geometry.
            opacity: Multiplier applied on top of the path's own opacity,
                clamped into ``[0.0, 1.0]``.
            transform: Mapping from viewbox space to pixel space.

        Raises:
            PathRenderError: If the path cannot be rasterized.
        """
        opacity = clamp_opacity(opacity) * clamp_opacity(self.opacity)
        fill = self._resolve_paint(self.fill, opacity * clamp_opacity(self.fill_opacity))
        stroke = self._resolve_paint(
            self.stroke, opacity * clamp_opacity(self.stroke_opacity)
        )
        if fill is None and (stroke is None or self.stroke_width <= 0):
            return

        subpaths = self.subpaths(transform)
        for points, _ in subpaths:
            if not np.all(np.isfinite(points)):
                raise PathRenderError(
                    "Transformed geometry contains non-finite coordinates",
                    path_id=self.id,
                )

        try:
            if fill is not None:
                surface.fill_polygons(
                    [points for points, _ in subpaths], fill, fill_rule=self.fill_rule
                )
            if stroke is not None and self.stroke_width > 0:
                polylines = [
                    np.vstack([points, points[:1]]) if closed else points
                    for points, closed in subpaths
                ]
                width = self.stroke_width * (transform @ self.transform).scale_factor
                surface.stroke_polylines(polylines, stroke, width)
        except (ValueError, OverflowError) as e:
            raise PathRenderError(f"Rasterizer rejected path: {e}", path_id=self.id) from e

    def _resolve_paint(self, paint: Paint, opacity: float) -> Optional[Color]:
        if paint is None:
            return None
        if isinstance(paint, str):
            raise PathRenderError(
                f"Unsupported paint server: {paint}", path_id=self.id
            )
        r, g, b, a = paint
        return (r, g, b, int(round(a * opacity)))


def _flatten_path(segments: Path, scale: float) -> list[tuple[np.ndarray, bool]]:
    result = []
    for subpath in segments.continuous_subpaths():
        if len(subpath) == 0:
            continue
        points = [subpath[0].start]
        for segment in subpath:
            points.extend(_flatten_segment(segment, scale))
        xy = np.array([[p.real, p.imag] for p in points], dtype=np.float64)
        result.append((xy, subpath.isclosed()))
    return result


def _flatten_segment(segment, scale: float) -> list[complex]:
    """Sample a segment at ``t`` in ``(0, 1]``, proportionally to its size."""
    if isinstance(segment, Line):
        return [segment.end]
    if isinstance(segment, (QuadraticBezier, CubicBezier)):
        control = segment.bpoints()
        length = sum(abs(b - a) for a, b in zip(control, control[1:]))
    elif isinstance(segment, Arc):
        length = max(abs(segment.radius.real), abs(segment.radius.imag)) * math.radians(
            abs(segment.delta)
        )
    else:
        length = abs(segment.end - segment.start)
    if not math.isfinite(length):
        raise PathRenderError(f"Segment has non-finite length: {segment!r}")
    target = length * scale / FLATTEN_TOLERANCE
    if math.isfinite(target):
        steps = int(min(MAX_CURVE_STEPS, max(1, math.ceil(target))))
    else:
        steps = MAX_CURVE_STEPS
    return [segment.point(t) for t in np.linspace(0.0, 1.0, steps + 1)[1:]]
