import dataclasses
import logging
import xml.etree.ElementTree as ET
from typing import Iterator, NamedTuple, Optional

from iconraster.core.path import SvgPath, clamp_opacity
from iconraster.core.transform import Affine, viewport_transform
from iconraster.errors import DegenerateGeometryError, PathRenderError
from iconraster.rasterizer import BaseSurface, Color

logger = logging.getLogger(__name__)


class ViewBox(NamedTuple):
    """Logical frame the paths are authored in."""

    x: float
    y: float
    width: float
    height: float


@dataclasses.dataclass(frozen=True)
class Gradient:
    """Gradient paint server collected by the front-end. Not rendered."""

    id: str
    kind: str
    stops: tuple[tuple[float, Color], ...] = ()
    attributes: dict[str, str] = dataclasses.field(default_factory=dict)


class DrawResult(NamedTuple):
    """Outcome of drawing one path; ``error`` is None on success."""

    index: int
    path: SvgPath
    error: Optional[PathRenderError]


@dataclasses.dataclass
class Icon:
    """Parsed icon: a viewbox plus paths drawn in order.

    ``transform`` maps viewbox space to pixel space for :meth:`draw`. It is
    the only field meant to change after construction, through
    :meth:`set_viewport` and :meth:`apply_transform`. Neither is thread-safe;
    use :meth:`copy` or :func:`iconraster.render`, which never mutates the
    icon, when rendering concurrently.

    Example::

        icon = Icon(ViewBox(0, 0, 24, 24), paths=[SvgPath("M0 0 H24 V24 Z")])
        icon.set_viewport(0, 0, 48, 48)
        warnings = icon.draw(surface)
    """

    viewbox: ViewBox
    paths: list[SvgPath] = dataclasses.field(default_factory=list)
    transform: Affine = dataclasses.field(default_factory=Affine.identity)
    titles: list[str] = dataclasses.field(default_factory=list)
    descriptions: list[str] = dataclasses.field(default_factory=list)
    gradients: dict[str, Gradient] = dataclasses.field(default_factory=dict)
    definitions: dict[str, ET.Element] = dataclasses.field(default_factory=dict)
    width: Optional[float] = None
    height: Optional[float] = None

    def set_viewport(self, x: float, y: float, w: float, h: float) -> None:
        """Draw within the rectangle ``(x, y, w, h)``.

        The current transform is replaced, not composed; any transform set
        by :meth:`apply_transform` beforehand is lost.
        """
        self.transform = viewport_transform(self.viewbox, x, y, w, h)

    def apply_transform(self, matrix: Affine) -> None:
        """Layer ``matrix`` on top of the current transform (``matrix @ transform``).

        Raises:
            DegenerateGeometryError: If the result is not invertible.
        """
        transform = matrix @ self.transform
        if not transform.is_invertible():
            raise DegenerateGeometryError(
                f"Applying {matrix!r} gives a non-invertible transform"
            )
        self.transform = transform

    def iter_draw(
        self,
        surface: BaseSurface,
        opacity: float = 1.0,
        transform: Optional[Affine] = None,
    ) -> Iterator[DrawResult]:
        """Draw each path in order, yielding one result per path.

        All paths share ``transform`` (``self.transform`` when omitted) and
        the opacity multiplier. Drawing continues after a failed path.
        """
        opacity = clamp_opacity(opacity)
        if transform is None:
            transform = self.transform
        for index, path in enumerate(self.paths):
            try:
                path.draw(surface, opacity, transform)
            except PathRenderError as e:
                e.index = index
                yield DrawResult(index, path, e)
            else:
                yield DrawResult(index, path, None)

    def draw(
        self,
        surface: BaseSurface,
        opacity: float = 1.0,
        transform: Optional[Affine] = None,
    ) -> list[PathRenderError]:
        """Draw all paths and return the failures of skipped paths."""
        warnings = []
        for result in self.iter_draw(surface, opacity, transform):
            if result.error is not None:
                logger.warning(
                    "Skipped path %d (id=%s): %s",
                    result.index,
                    result.path.id,
                    result.error,
                )
                warnings.append(result.error)
        return warnings

    def copy(self) -> "Icon":
        """Shallow copy with its own path list and transform."""
        return dataclasses.replace(
            self,
            paths=list(self.paths),
            transform=Affine(self.transform.matrix.copy()),
            titles=list(self.titles),
            descriptions=list(self.descriptions),
        )

