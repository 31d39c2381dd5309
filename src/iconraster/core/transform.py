import logging
import math
from typing import Optional

import numpy as np
from svgpathtools.parser import parse_transform

from iconraster.errors import DegenerateGeometryError

logger = logging.getLogger(__name__)


class Affine:
    """2D affine transform stored as a 3x3 homogeneous matrix.

    Builder methods post-multiply, so ``Affine.identity().translate(tx, ty).scale(sx, sy)``
    is the matrix product ``Translate(tx, ty) @ Scale(sx, sy)``: points are
    scaled first, then translated.

    Example:

        transform = Affine.identity().translate(10, 0).scale(2, 2)
        transform.apply(np.array([[1.0, 1.0]]))  # [[12.0, 2.0]]
    """

    __slots__ = ("matrix",)

    def __init__(self, matrix: Optional[np.ndarray] = None) -> None:
        if matrix is None:
            matrix = np.identity(3)
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"Affine matrix must be 3x3, got {matrix.shape}")
        self.matrix = matrix

    @classmethod
    def identity(cls) -> "Affine":
        return cls()

    @classmethod
    def from_values(
        cls, a: float, b: float, c: float, d: float, e: float, f: float
    ) -> "Affine":
        """Create from SVG ``matrix(a b c d e f)`` values."""
        return cls(np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]]))

    @classmethod
    def from_svg(cls, value: Optional[str]) -> "Affine":
        """Parse an SVG ``transform`` attribute."""
        if not value or not value.strip():
            return cls()
        return cls(parse_transform(value))

    @classmethod
    def translation(cls, tx: float, ty: float) -> "Affine":
        return cls(np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]]))

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> "Affine":
        sy = sx if sy is None else sy
        return cls(np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]]))

    @classmethod
    def rotation(cls, degrees: float) -> "Affine":
        theta = math.radians(degrees)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return cls(
            np.array([[cos_t, -sin_t, 0.0], [sin_t, cos_t, 0.0], [0.0, 0.0, 1.0]])
        )

    def translate(self, tx: float, ty: float) -> "Affine":
        return self @ Affine.translation(tx, ty)

    def scale(self, sx: float, sy: Optional[float] = None) -> "Affine":
        return self @ Affine.scaling(sx, sy)

    def rotate(self, degrees: float) -> "Affine":
        return self @ Affine.rotation(degrees)

    def skew(self, ax_degrees: float, ay_degrees: float) -> "Affine":
        skew = np.array(
            [
                [1.0, math.tan(math.radians(ax_degrees)), 0.0],
                [math.tan(math.radians(ay_degrees)), 1.0, 0.0],
                [0.0, 0.0, 1.0],
            ]
        )
        return self @ Affine(skew)

    def __matmul__(self, other: "Affine") -> "Affine":
        if not isinstance(other, Affine):
            return NotImplemented
        return Affine(self.matrix @ other.matrix)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Affine):
            return NotImplemented
        return bool(np.array_equal(self.matrix, other.matrix))

    def __hash__(self) -> int:
        return hash(self.matrix.tobytes())

    def __repr__(self) -> str:
        return f"Affine({np.around(self.matrix, 4).tolist()[:2]})"

    def isclose(self, other: "Affine", atol: float = 1e-9) -> bool:
        return bool(np.allclose(self.matrix, other.matrix, atol=atol))

    @property
    def determinant(self) -> float:
        return float(np.linalg.det(self.matrix[:2, :2]))

    @property
    def scale_factor(self) -> float:
        """Average linear scale, used to scale stroke widths."""
        return math.sqrt(abs(self.determinant))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.matrix)))

    def is_invertible(self) -> bool:
        return self.is_finite() and abs(self.determinant) > 1e-12

    def inverse(self) -> "Affine":
        if not self.is_invertible():
            raise DegenerateGeometryError(f"Transform is not invertible: {self!r}")
        return Affine(np.linalg.inv(self.matrix))

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Transform an ``(N, 2)`` array of points."""
        points = np.asarray(points, dtype=np.float64)
        if len(points) == 0:
            return points.reshape(0, 2)
        return points @ self.matrix[:2, :2].T + self.matrix[:2, 2]


def viewport_transform(viewbox, x: float, y: float, w: float, h: float) -> Affine:
    """Map the viewbox onto the target rectangle ``(x, y, w, h)``.

    The result is ``Translate(x - viewbox.x, y - viewbox.y) @ Scale(w / viewbox.width,
    h / viewbox.height)``. The translation is not scaled, so a viewbox with a
    non-zero origin lands at ``viewbox.x * scale + x - viewbox.x``.

    Raises:
        DegenerateGeometryError: If the viewbox or target size is zero,
            negative or not finite.
    """
    for name, value in (
        ("viewbox width", viewbox.width),
        ("viewbox height", viewbox.height),
        ("target width", w),
        ("target height", h),
    ):
        if not math.isfinite(value) or value <= 0:
            raise DegenerateGeometryError(f"Invalid {name}: {value}")
    if not all(math.isfinite(v) for v in (x, y, viewbox.x, viewbox.y)):
        raise DegenerateGeometryError(
            f"Non-finite viewport origin: ({x}, {y}) viewbox=({viewbox.x}, {viewbox.y})"
        )

    scale_w = w / viewbox.width
    scale_h = h / viewbox.height
    transform = Affine.identity().translate(x - viewbox.x, y - viewbox.y)
    transform = transform.scale(scale_w, scale_h)
    if not transform.is_invertible():
        raise DegenerateGeometryError(f"Degenerate viewport transform: {transform!r}")
    logger.debug("Viewport transform for (%g, %g, %g, %g): %r", x, y, w, h, transform)
    return transform
