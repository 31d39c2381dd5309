from logging import getLogger

from iconraster.core import (
    Affine,
    Fixed,
    FixedHeight,
    FixedWidth,
    Gradient,
    Icon,
    Natural,
    SvgPath,
    ViewBox,
    size_from_sentinel,
    viewport_transform,
)
from iconraster.errors import (
    DegenerateGeometryError,
    EncodeError,
    FileIOError,
    IconRasterError,
    PathRenderError,
    ResourceLimitError,
)
from iconraster.render import (
    RenderResult,
    render,
    render_resized,
    save,
    save_jpeg,
    save_png,
)
from iconraster.resource_limits import ResourceLimits
from iconraster.svg_loader import icon_from_string, load_icon
from iconraster.version import __version__ as __version__

logger = getLogger(__name__)

__all__ = [
    "Affine",
    "DegenerateGeometryError",
    "EncodeError",
    "FileIOError",
    "Fixed",
    "FixedHeight",
    "FixedWidth",
    "Gradient",
    "Icon",
    "IconRasterError",
    "Natural",
    "PathRenderError",
    "RenderResult",
    "ResourceLimitError",
    "ResourceLimits",
    "SvgPath",
    "ViewBox",
    "icon_from_string",
    "load_icon",
    "render",
    "render_resized",
    "save",
    "save_jpeg",
    "save_png",
    "size_from_sentinel",
    "viewport_transform",
]
