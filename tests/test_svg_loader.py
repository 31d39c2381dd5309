"""Tests for loading icons from SVG markup."""

import xml.etree.ElementTree as ET

import pytest
import svgwrite
from conftest import get_fixture

from iconraster import Affine, Fixed, ViewBox, icon_from_string, load_icon, render


class TestLoadIcon:
    """Tests for load_icon with fixture files."""

    def test_square(self) -> None:
        icon = load_icon(get_fixture("square.svg"))
        assert icon.viewbox == ViewBox(0, 0, 24, 24)
        assert (icon.width, icon.height) == (24, 24)
        assert icon.titles == ["Square"]
        assert icon.descriptions == ["A filled square"]
        assert len(icon.paths) == 1
        assert icon.paths[0].id == "square"
        assert icon.paths[0].fill == (0, 128, 255, 255)

    def test_shapes_order(self) -> None:
        icon = load_icon(get_fixture("shapes.svg"))
        assert [p.id for p in icon.paths] == [
            "rect",
            "circle",
            "ellipse",
            "line",
            "polyline",
            "polygon",
            "gradient-rect",
        ]

    def test_inherited_style(self) -> None:
        paths = {p.id: p for p in load_icon(get_fixture("shapes.svg")).paths}
        rect = paths["rect"]
        assert rect.d == "M0 0 H10 V10 H0 Z"
        assert rect.fill == (255, 0, 0, 255)
        assert rect.opacity == 0.5
        assert rect.transform.isclose(Affine.translation(2, 0))
        assert paths["circle"].fill == (0, 255, 0, 255)
        assert paths["circle"].opacity == 0.5

    def test_presentation_attributes(self) -> None:
        paths = {p.id: p for p in load_icon(get_fixture("shapes.svg")).paths}
        assert paths["ellipse"].fill_opacity == 0.25
        assert paths["ellipse"].fill == (0, 0, 0, 255)
        assert paths["line"].stroke == (0, 0, 0, 255)
        assert paths["line"].stroke_width == 2.0
        assert paths["polyline"].fill is None
        assert paths["polyline"].stroke == (51, 51, 51, 255)
        assert paths["polygon"].fill_rule == "evenodd"
        assert paths["polygon"].d.endswith("Z")
        assert paths["gradient-rect"].fill == "url(#grad)"

    def test_definitions(self) -> None:
        icon = load_icon(get_fixture("shapes.svg"))
        assert "hidden" in icon.definitions
        gradient = icon.gradients["grad"]
        assert gradient.kind == "linear"
        assert gradient.stops == ((0.0, (255, 0, 0, 255)), (1.0, (0, 0, 255, 128)))

    def test_render_reports_gradient(self) -> None:
        result = render(load_icon(get_fixture("shapes.svg")))
        assert result.size == (100, 50)
        assert len(result.warnings) == 1
        assert result.warnings[0].path_id == "gradient-rect"
        assert result.warnings[0].index == 6

    def test_missing_file(self) -> None:
        with pytest.raises(OSError):
            load_icon(get_fixture("missing.svg"))


class TestIconFromString:
    """Tests for icon_from_string."""

    def test_not_svg(self) -> None:
        with pytest.raises(ValueError):
            icon_from_string("<html/>")

    def test_malformed(self) -> None:
        with pytest.raises(ET.ParseError):
            icon_from_string("<svg")

    def test_viewbox_from_size(self) -> None:
        icon = icon_from_string('<svg width="32px" height="16"/>')
        assert icon.viewbox == ViewBox(0, 0, 32, 16)

    def test_default_viewbox(self) -> None:
        assert icon_from_string("<svg/>").viewbox == ViewBox(0, 0, 100, 100)

    def test_rounded_rect(self) -> None:
        icon = icon_from_string(
            '<svg viewBox="0 0 10 10"><rect width="10" height="10" rx="2"/></svg>'
        )
        assert "A2 2 0 0 1" in icon.paths[0].d

    def test_transform_attribute(self) -> None:
        icon = icon_from_string(
            '<svg viewBox="0 0 10 10">'
            '<path d="M2 2 H4 V4 H2 Z" fill="blue" transform="scale(2)"/>'
            "</svg>"
        )
        image = render(icon).image
        assert image.getpixel((7, 7)) == (0, 0, 255, 255)
        assert image.getpixel((2, 2))[3] == 0

    def test_invalid_color(self, caplog) -> None:
        icon = icon_from_string('<svg><path d="M0 0 H1 V1 Z" fill="nocolor"/></svg>')
        assert icon.paths[0].fill is None
        assert "nocolor" in caplog.text

    def test_invalid_gradient_offset(self, caplog) -> None:
        """Test that a bad stop is dropped and the rest of the icon still loads."""
        icon = icon_from_string(
            '<svg viewBox="0 0 10 10"><defs><radialGradient id="g">'
            '<stop offset="half" stop-color="red"/>'
            '<stop offset="1" stop-color="blue"/>'
            '</radialGradient></defs><path d="M0 0 H1 V1 Z"/></svg>'
        )
        assert icon.gradients["g"].kind == "radial"
        assert icon.gradients["g"].stops == ((1.0, (0, 0, 255, 255)),)
        assert len(icon.paths) == 1
        assert "invalid offset 'half'" in caplog.text

    def test_svgwrite_document(self) -> None:
        drawing = svgwrite.Drawing(size=(32, 16), viewBox="0 0 32 16")
        drawing.add(drawing.rect(insert=(0, 0), size=(16, 16), fill="red"))
        drawing.add(drawing.circle(center=(24, 8), r=6, fill="blue"))

        icon = icon_from_string(drawing.tostring())
        image = render(icon, Fixed(32, 16)).image
        assert image.size == (32, 16)
        assert image.getpixel((8, 8)) == (255, 0, 0, 255)
        assert image.getpixel((24, 8)) == (0, 0, 255, 255)
        assert image.getpixel((31, 0)) == (0, 0, 0, 0)

