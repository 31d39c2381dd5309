from .icon import DrawResult, Gradient, Icon, ViewBox
from .path import SvgPath, clamp_opacity
from .size import Fixed, FixedHeight, FixedWidth, Natural, SizePolicy, size_from_sentinel
from .transform import Affine, viewport_transform

__all__ = [
    "Affine",
    "DrawResult",
    "Fixed",
    "FixedHeight",
    "FixedWidth",
    "Gradient",
    "Icon",
    "Natural",
    "SizePolicy",
    "SvgPath",
    "ViewBox",
    "clamp_opacity",
    "size_from_sentinel",
    "viewport_transform",
]
