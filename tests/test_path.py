"""Tests for drawing a single SVG path."""

import math

import numpy as np
import pytest
from conftest import RED, RecordingSurface

from iconraster import Affine, PathRenderError, SvgPath
from iconraster.core import clamp_opacity


class TestSvgPathDraw:
    """Tests for SvgPath.draw against a recording surface."""

    def test_fill_is_transformed(self) -> None:
        """Test that the polygon is submitted in pixel space with scaled alpha."""
        surface = RecordingSurface()
        path = SvgPath("M0 0 L10 0 L10 10 Z", fill=(255, 0, 0, 200))
        path.draw(surface, 0.5, Affine.scaling(2))

        assert len(surface.fills) == 1
        polygons, color, fill_rule = surface.fills[0]
        assert color == (255, 0, 0, 100)
        assert fill_rule == "nonzero"
        np.testing.assert_allclose(polygons[0], [[0, 0], [20, 0], [20, 20], [0, 0]])
        assert surface.strokes == []

    def test_path_transform_applies_first(self) -> None:
        """Test that the path's own transform is applied before the viewport."""
        surface = RecordingSurface()
        path = SvgPath("M0 0 L1 0 L1 1 Z", transform=Affine.translation(5, 0))
        path.draw(surface, 1.0, Affine.scaling(2))
        np.testing.assert_allclose(surface.fills[0][0][0][0], [10, 0])

    def test_opacity_multiplies(self) -> None:
        """Test path opacity, fill opacity and the caller's opacity combine."""
        surface = RecordingSurface()
        path = SvgPath("M0 0 H1 V1 Z", fill=RED, opacity=0.5, fill_opacity=0.5)
        path.draw(surface, 0.5, Affine.identity())
        assert surface.fills[0][1] == (255, 0, 0, 32)

    def test_curve_flattening_scales_with_transform(self) -> None:
        """Test that curves get more samples when drawn larger."""
        path = SvgPath("M0 0 Q5 10 10 0")
        small = path.subpaths(Affine.identity())
        large = path.subpaths(Affine.scaling(10))
        assert len(small) == 1
        assert len(small[0][0]) == 13
        assert len(large[0][0]) > len(small[0][0])
        np.testing.assert_allclose(large[0][0][-1], [100, 0])
        assert small[0][1] is False

    def test_arc_is_flattened(self) -> None:
        """Test that arcs stay on their circle."""
        path = SvgPath("M0 5 A5 5 0 1 0 10 5 A5 5 0 1 0 0 5 Z")
        (points, closed), = path.subpaths(Affine.identity())
        assert closed
        distances = np.hypot(points[:, 0] - 5, points[:, 1] - 5)
        np.testing.assert_allclose(distances, 5.0, atol=1e-9)

    def test_stroke_width_scales(self) -> None:
        """Test that stroke width follows the transform scale."""
        surface = RecordingSurface()
        path = SvgPath("M0 0 L10 0", fill=None, stroke=RED, stroke_width=2)
        path.draw(surface, 1.0, Affine.scaling(3))

        assert surface.fills == []
        polylines, color, width = surface.strokes[0]
        assert color == RED
        assert math.isclose(width, 6.0)
        np.testing.assert_allclose(polylines[0], [[0, 0], [30, 0]])

    def test_closed_stroke_returns_to_start(self) -> None:
        """Test that closed subpaths are stroked back to their first point."""
        surface = RecordingSurface()
        path = SvgPath("M0 0 H4 V4 Z", fill=None, stroke=RED)
        path.draw(surface, 1.0, Affine.identity())
        polyline = surface.strokes[0][0][0]
        np.testing.assert_allclose(polyline[0], polyline[-1])

    def test_invisible_path_is_skipped(self) -> None:
        """Test that paths without fill or stroke submit nothing."""
        surface = RecordingSurface()
        SvgPath("M0 0 H1 V1 Z", fill=None).draw(surface, 1.0, Affine.identity())
        assert surface.fills == [] and surface.strokes == []

    def test_multiple_subpaths(self) -> None:
        """Test that each subpath becomes its own polygon."""
        surface = RecordingSurface()
        path = SvgPath("M0 0 H10 V10 H0 Z M2 2 H8 V8 H2 Z", fill_rule="evenodd")
        path.draw(surface, 1.0, Affine.identity())
        polygons, _, fill_rule = surface.fills[0]
        assert len(polygons) == 2
        assert fill_rule == "evenodd"


class TestSvgPathErrors:
    """Tests for path failures."""

    def test_paint_server(self) -> None:
        """Test that gradient references are reported, not drawn."""
        path = SvgPath("M0 0 H1 V1 Z", fill="url(#grad)", id="shape")
        with pytest.raises(PathRenderError) as excinfo:
            path.draw(RecordingSurface(), 1.0, Affine.identity())
        assert excinfo.value.path_id == "shape"
        assert "url(#grad)" in str(excinfo.value)

    @pytest.mark.parametrize("d", ["10 10 L 20 20", "M0 0 A5 5 0 0 1 0 0"])
    def test_invalid_path_data(self, d: str) -> None:
        """Test that data the parser rejects is reported on first use."""
        path = SvgPath(d, id="bad")
        with pytest.raises(PathRenderError) as excinfo:
            path.draw(RecordingSurface(), 1.0, Affine.identity())
        assert excinfo.value.path_id == "bad"

    def test_non_finite_geometry(self) -> None:
        """Test that overflowing coordinates never reach the surface."""
        surface = RecordingSurface()
        path = SvgPath("M0 0 L1e308 0 L1e308 1e308 Z")
        with pytest.raises(PathRenderError):
            path.draw(surface, 1.0, Affine.scaling(10))
        assert surface.fills == []

    def test_surface_rejection(self) -> None:
        """Test that surface ValueErrors become path errors."""

        class RejectingSurface(RecordingSurface):
            def fill_polygons(self, polygons, color, fill_rule="nonzero") -> None:
                raise ValueError("no")

        path = SvgPath("M0 0 H1 V1 Z", id="p")
        with pytest.raises(PathRenderError) as excinfo:
            path.draw(RejectingSurface(), 1.0, Affine.identity())
        assert isinstance(excinfo.value.__cause__, ValueError)


class TestClampOpacity:
    """Tests for clamp_opacity."""

    @pytest.mark.parametrize(
        "value, expected", [(0.5, 0.5), (-1.0, 0.0), (2.0, 1.0), (float("inf"), 1.0)]
    )
    def test_clamp(self, value: float, expected: float) -> None:
        assert clamp_opacity(value) == expected

    def test_nan(self) -> None:
        with pytest.raises(ValueError):
            clamp_opacity(float("nan"))
