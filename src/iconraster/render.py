"""Render icons to pixel buffers and save them as PNG or JPEG files.

Each call derives its own viewport transform from the requested size, so
rendering never mutates the icon.
"""

import dataclasses
import logging
from typing import Any, Callable, Optional

from PIL import Image

from iconraster import image_utils
from iconraster.core.icon import Icon
from iconraster.core.size import Natural, SizePolicy, size_from_sentinel, to_pixels
from iconraster.core.transform import Affine, viewport_transform
from iconraster.errors import DegenerateGeometryError, PathRenderError
from iconraster.rasterizer import BaseSurface, create_surface
from iconraster.resource_limits import ResourceLimits

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[int, int], BaseSurface]


@dataclasses.dataclass
class RenderResult:
    """Rendered image plus the paths that could not be drawn.

    ``image`` is a fresh RGBA image owned by the caller.
    """

    image: Image.Image
    warnings: list[PathRenderError] = dataclasses.field(default_factory=list)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


def render(
    icon: Icon,
    size: Optional[SizePolicy] = None,
    *,
    transform: Optional[Affine] = None,
    limits: Optional[ResourceLimits] = None,
    surface_factory: Optional[SurfaceFactory] = None,
    **surface_options: Any,
) -> RenderResult:
    """Render the icon into a new RGBA image.

    Args:
        icon: Icon to render.
        size: Size policy; natural viewbox size when None.
        transform: Extra transform applied in pixel space after the
            viewport mapping (``transform @ viewport``).
        limits: Resource limits; ``ResourceLimits.default()`` when None.
        surface_factory: Callable creating the drawing surface from
            ``(width, height)``. Defaults to the Pillow surface.
        **surface_options: Passed to the default surface factory
            (e.g. ``supersample=1`` to disable anti-aliasing).

    Returns:
        RenderResult whose image is exactly ``int(width)`` x ``int(height)``
        pixels, with the warnings of skipped paths.

    Raises:
        DegenerateGeometryError: If the viewbox or the resolved size is empty.
        ResourceLimitError: If the size exceeds the limits.
    """
    if size is None:
        size = Natural()
    if limits is None:
        limits = ResourceLimits.default()

    width, height = size.resolve(icon.viewbox)
    pixel_width, pixel_height = to_pixels(width, height)
    viewport = viewport_transform(icon.viewbox, 0.0, 0.0, width, height)
    if transform is not None:
        viewport = transform @ viewport
        if not viewport.is_invertible():
            raise DegenerateGeometryError(f"Render transform is not invertible: {transform!r}")
    limits.check_size(pixel_width, pixel_height)

    logger.debug(
        "Rendering %d paths at %dx%d", len(icon.paths), pixel_width, pixel_height
    )
    if surface_factory is None:
        surface = create_surface(pixel_width, pixel_height, **surface_options)
    else:
        surface = surface_factory(pixel_width, pixel_height)
    warnings = icon.draw(surface, 1.0, transform=viewport)
    return RenderResult(image=surface.to_image(), warnings=warnings)


def render_resized(
    icon: Icon, width: float = -1, height: float = -1, **kwargs: Any
) -> RenderResult:
    """Render with the ``-1`` convention for unspecified width or height.

    A width below 1 uses the viewbox width; a height below 1 keeps the
    viewbox aspect ratio.
    """
    return render(icon, size_from_sentinel(icon.viewbox, width, height), **kwargs)


def save(
    icon: Icon,
    filepath: str,
    size: Optional[SizePolicy] = None,
    image_format: Optional[str] = None,
    quality: Optional[int] = None,
    **kwargs: Any,
) -> list[PathRenderError]:
    """Render the icon and save it to file.

    Args:
        icon: Icon to render.
        filepath: Output file path.
        size: Size policy; natural size when None.
        image_format: ``png`` or ``jpeg``; guessed from the extension when None.
        quality: JPEG quality. Ignored for PNG.
        **kwargs: Passed to :func:`render`.

    Returns:
        Warnings of paths skipped during rendering.

    Raises:
        DegenerateGeometryError: If the viewbox or the resolved size is empty.
        EncodeError: If the codec fails.
        FileIOError: If the file cannot be created, written or flushed.
    """
    if image_format is None:
        image_format = image_utils.format_from_path(filepath)
    image_format = image_utils.normalize_format(image_format)
    result = render(icon, size, **kwargs)
    image_utils.save_image(result.image, filepath, image_format, quality=quality)
    logger.info("Saved %s %dx%d to %s", image_format, *result.size, filepath)
    return result.warnings


def save_png(
    icon: Icon, filepath: str, width: float = -1, height: float = -1, **kwargs: Any
) -> list[PathRenderError]:
    """Save the icon as PNG, using the ``-1`` convention for the size."""
    size = size_from_sentinel(icon.viewbox, width, height)
    return save(icon, filepath, size, image_format="PNG", **kwargs)


def save_jpeg(
    icon: Icon,
    filepath: str,
    width: float = -1,
    height: float = -1,
    quality: int = image_utils.DEFAULT_JPEG_QUALITY,
    **kwargs: Any,
) -> list[PathRenderError]:
    """Save the icon as JPEG, using the ``-1`` convention for the size.

    Transparent pixels become white; JPEG has no alpha channel.
    """
    size = size_from_sentinel(icon.viewbox, width, height)
    return save(icon, filepath, size, image_format="JPEG", quality=quality, **kwargs)
