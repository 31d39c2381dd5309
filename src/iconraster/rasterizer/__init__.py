"""Drawing surfaces that scan-convert path geometry into RGBA pixels.

This module provides the PillowSurface, which fills polygons and strokes
polylines with anti-aliasing by supersampling a coverage mask.
"""

from .base_rasterizer import BaseSurface, Color
from .pillow_rasterizer import PillowSurface, create_surface

__all__ = ["BaseSurface", "Color", "PillowSurface", "create_surface"]
