"""Minimal SVG front-end.

Builds an :class:`~iconraster.core.Icon` from SVG markup. Basic shapes are
rewritten as path data; presentation attributes, ``style`` declarations and
``transform`` attributes are resolved down the element tree. Gradients and
``<defs>`` content are collected but not rendered.
"""

import logging
import os
import xml.etree.ElementTree as ET
from typing import Optional, Union

from PIL import ImageColor

from iconraster import svg_utils
from iconraster.core.icon import Gradient, Icon, ViewBox
from iconraster.core.path import Paint, SvgPath
from iconraster.core.transform import Affine
from iconraster.rasterizer import Color

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 100.0

SHAPE_TAGS = ("path", "rect", "circle", "ellipse", "line", "polyline", "polygon")
GRADIENT_TAGS = {"linearGradient": "linear", "radialGradient": "radial"}
# Containers whose children are referenced, never drawn directly.
NON_RENDERED_TAGS = ("defs", "symbol", "clipPath", "mask", "marker", "pattern")
INHERITED_PROPERTIES = (
    "fill",
    "stroke",
    "stroke-width",
    "fill-opacity",
    "stroke-opacity",
    "fill-rule",
)
PRESENTATION_PROPERTIES = INHERITED_PROPERTIES + ("opacity", "display")

BLACK: Color = (0, 0, 0, 255)


def load_icon(filepath: Union[str, "os.PathLike[str]"]) -> Icon:
    """Load an icon from an SVG file.

    Raises:
        OSError: If the file cannot be read.
        xml.etree.ElementTree.ParseError: If the file is not well-formed XML.
    """
    logger.debug("Loading %s", filepath)
    return _IconBuilder(ET.parse(filepath).getroot()).build()


def icon_from_string(markup: Union[str, bytes]) -> Icon:
    """Build an icon from SVG markup."""
    return _IconBuilder(ET.fromstring(markup)).build()


class _IconBuilder:
    def __init__(self, root: ET.Element) -> None:
        if svg_utils.strip_namespace(root.tag) != "svg":
            raise ValueError(f"Root element is not <svg>: {root.tag}")
        self.root = root
        self.paths: list[SvgPath] = []
        self.titles: list[str] = []
        self.descriptions: list[str] = []
        self.gradients: dict[str, Gradient] = {}
        self.definitions: dict[str, ET.Element] = {}

    def build(self) -> Icon:
        width = svg_utils.parse_length(self.root.get("width"))
        height = svg_utils.parse_length(self.root.get("height"))
        viewbox = _parse_viewbox(self.root.get("viewBox"))
        if viewbox is None:
            viewbox = ViewBox(0.0, 0.0, width or DEFAULT_SIZE, height or DEFAULT_SIZE)

        self._visit(self.root, {}, 1.0, Affine.identity())
        logger.debug(
            "Parsed icon: %d paths, %d gradients, viewBox %s",
            len(self.paths),
            len(self.gradients),
            viewbox,
        )
        return Icon(
            viewbox=viewbox,
            paths=self.paths,
            titles=self.titles,
            descriptions=self.descriptions,
            gradients=self.gradients,
            definitions=self.definitions,
            width=width,
            height=height,
        )

    def _visit(
        self,
        node: ET.Element,
        inherited: dict[str, str],
        opacity: float,
        transform: Affine,
    ) -> None:
        tag = svg_utils.strip_namespace(node.tag)
        if tag == "title":
            self.titles.append(svg_utils.get_text(node))
            return
        if tag == "desc":
            self.descriptions.append(svg_utils.get_text(node))
            return
        if tag in GRADIENT_TAGS:
            self._add_gradient(node, tag)
            return
        if tag in NON_RENDERED_TAGS:
            self._collect_definitions(node)
            return

        properties = _presentation_properties(node)
        if properties.get("display") == "none":
            return
        style = dict(inherited)
        style.update((k, v) for k, v in properties.items() if k in INHERITED_PROPERTIES)
        opacity *= _parse_opacity(properties.get("opacity"))
        transform = transform @ Affine.from_svg(node.get("transform"))

        if tag in SHAPE_TAGS:
            d = _shape_to_path_data(tag, node)
            if d:
                self.paths.append(_make_path(d, style, opacity, transform, node.get("id")))
            return
        for child in node:
            self._visit(child, style, opacity, transform)

    def _collect_definitions(self, node: ET.Element) -> None:
        for child in node.iter():
            if child is node:
                continue
            tag = svg_utils.strip_namespace(child.tag)
            if tag in GRADIENT_TAGS:
                self._add_gradient(child, tag)
            elif child.get("id"):
                self.definitions[child.get("id")] = child

    def _add_gradient(self, node: ET.Element, tag: str) -> None:
        gradient_id = node.get("id")
        if not gradient_id:
            logger.debug("Ignoring <%s> without id", tag)
            return
        stops = []
        for stop in node:
            if svg_utils.strip_namespace(stop.tag) != "stop":
                continue
            properties = _presentation_properties(stop, ("stop-color", "stop-opacity"))
            offset = stop.get("offset", "0").strip()
            try:
                if offset.endswith("%"):
                    position = float(offset[:-1]) / 100.0
                else:
                    position = float(offset)
            except ValueError:
                logger.warning("Ignoring stop with invalid offset %r in %s", offset, gradient_id)
                continue
            color = _parse_color(properties.get("stop-color", "black")) or BLACK
            alpha = _parse_opacity(properties.get("stop-opacity"))
            stops.append(
                (min(1.0, max(0.0, position)), color[:3] + (int(round(color[3] * alpha)),))
            )
        self.gradients[gradient_id] = Gradient(
            id=gradient_id,
            kind=GRADIENT_TAGS[tag],
            stops=tuple(stops),
            attributes=dict(node.attrib),
        )


def _parse_viewbox(value: Optional[str]) -> Optional[ViewBox]:
    numbers = svg_utils.parse_numbers(value)
    if len(numbers) != 4:
        if value:
            logger.warning("Ignoring malformed viewBox %r", value)
        return None
    return ViewBox(*numbers)


def _presentation_properties(
    node: ET.Element, names: tuple[str, ...] = PRESENTATION_PROPERTIES
) -> dict[str, str]:
    """Presentation attributes, overridden by ``style`` declarations."""
    properties = {name: node.get(name) for name in names if node.get(name) is not None}
    for key, value in svg_utils.parse_style(node.get("style")).items():
        if key in names:
            properties[key] = value
    return {k: v.strip() for k, v in properties.items() if v.strip() != "inherit"}


def _parse_opacity(value: Optional[str]) -> float:
    if value is None:
        return 1.0
    value = value.strip()
    try:
        if value.endswith("%"):
            return min(1.0, max(0.0, float(value[:-1]) / 100.0))
        return min(1.0, max(0.0, float(value)))
    except ValueError:
        logger.warning("Ignoring invalid opacity %r", value)
        return 1.0


def _parse_color(value: str) -> Optional[Color]:
    if value == "currentColor":
        return BLACK
    try:
        return ImageColor.getcolor(value, "RGBA")  # type: ignore[return-value]
    except ValueError:
        logger.warning("Ignoring unsupported color %r", value)
        return None


def _parse_paint(value: Optional[str], default: Paint) -> Paint:
    if value is None:
        return default
    if value == "none":
        return None
    if value.startswith("url("):
        # Paint servers stay as references; the fallback color is dropped.
        reference = svg_utils.get_funciri(value.split(")")[0] + ")")
        if reference is None:
            logger.warning("Ignoring malformed paint %r", value)
            return None
        return f"url(#{reference})"
    return _parse_color(value)


def _make_path(
    d: str,
    style: dict[str, str],
    opacity: float,
    transform: Affine,
    path_id: Optional[str],
) -> SvgPath:
    fill_rule = style.get("fill-rule", "nonzero")
    if fill_rule not in ("nonzero", "evenodd"):
        logger.warning("Unsupported fill-rule %r, using nonzero", fill_rule)
        fill_rule = "nonzero"
    return SvgPath(
        d=d,
        fill=_parse_paint(style.get("fill"), BLACK),
        stroke=_parse_paint(style.get("stroke"), None),
        stroke_width=svg_utils.parse_length(style.get("stroke-width"), 1.0) or 0.0,
        opacity=opacity,
        fill_opacity=_parse_opacity(style.get("fill-opacity")),
        stroke_opacity=_parse_opacity(style.get("stroke-opacity")),
        fill_rule=fill_rule,
        transform=transform,
        id=path_id,
    )


def _shape_to_path_data(tag: str, node: ET.Element) -> Optional[str]:
    """Rewrite a basic shape as path data. Returns None for empty shapes."""

    def length(name: str, default: float = 0.0) -> float:
        return svg_utils.parse_length(node.get(name), default) or 0.0

    n = svg_utils.num2str
    if tag == "path":
        return node.get("d", "").strip() or None

    if tag == "rect":
        x, y, w, h = length("x"), length("y"), length("width"), length("height")
        if w <= 0 or h <= 0:
            return None
        rx = svg_utils.parse_length(node.get("rx"))
        ry = svg_utils.parse_length(node.get("ry"))
        rx = ry if rx is None else rx
        ry = rx if ry is None else ry
        rx = min(max(rx or 0.0, 0.0), w / 2)
        ry = min(max(ry or 0.0, 0.0), h / 2)
        if rx == 0 or ry == 0:
            return f"M{n(x)} {n(y)} H{n(x + w)} V{n(y + h)} H{n(x)} Z"
        arc = f"A{n(rx)} {n(ry)} 0 0 1"
        return (
            f"M{n(x + rx)} {n(y)} H{n(x + w - rx)} {arc} {n(x + w)} {n(y + ry)} "
            f"V{n(y + h - ry)} {arc} {n(x + w - rx)} {n(y + h)} "
            f"H{n(x + rx)} {arc} {n(x)} {n(y + h - ry)} "
            f"V{n(y + ry)} {arc} {n(x + rx)} {n(y)} Z"
        )

    if tag in ("circle", "ellipse"):
        cx, cy = length("cx"), length("cy")
        if tag == "circle":
            rx = ry = length("r")
        else:
            rx, ry = length("rx"), length("ry")
        if rx <= 0 or ry <= 0:
            return None
        arc = f"A{n(rx)} {n(ry)} 0 1 0"
        return (
            f"M{n(cx - rx)} {n(cy)} {arc} {n(cx + rx)} {n(cy)} "
            f"{arc} {n(cx - rx)} {n(cy)} Z"
        )

    if tag == "line":
        x1, y1, x2, y2 = length("x1"), length("y1"), length("x2"), length("y2")
        return f"M{n(x1)} {n(y1)} L{n(x2)} {n(y2)}"

    if tag in ("polyline", "polygon"):
        numbers = svg_utils.parse_numbers(node.get("points"))
        if len(numbers) < 4:
            return None
        if len(numbers) % 2:
            logger.warning("Dropping odd trailing coordinate in <%s> points", tag)
            numbers = numbers[:-1]
        d = "M" + svg_utils.seq2str(numbers[:2]) + " L" + svg_utils.seq2str(numbers[2:])
        return d + " Z" if tag == "polygon" else d

    return None
