"""
Tests for the render pipeline.

Tests cover:
- Stage selection and ordering
- Source immutability and determinism
- Equivalence with running the stages by hand
- Pipeline summary
"""

import unittest

from PE_Libs.ImageEditingLib.adjustment_engine import apply_adjustments
from PE_Libs.ImageEditingLib.color_filter import apply_filter
from PE_Libs.ImageEditingLib.image_models import AdjustmentParams, EditState, ShapeOverlay
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PE_Libs.ImageEditingLib.sharpen_filter import apply_sharpen
from PE_Libs.PipelineLib.render_pipeline import (
    build_render_stages,
    get_render_summary,
    render,
)


def _checker(size=6):
    buffer = PixelBuffer.new(size, size, (40, 80, 120, 255))
    buffer.data[::2, ::2, :3] = (220, 180, 140)
    return buffer


class TestBuildRenderStages(unittest.TestCase):
    """Test stage selection."""

    def test_default_state(self):
        """Test an untouched state only runs the adjustment stage."""
        stages = build_render_stages(EditState())
        self.assertEqual([name for name, _ in stages], ["adjustments"])

    def test_full_state_order(self):
        """Test every stage runs in the fixed order."""
        state = EditState(
            adjustments=AdjustmentParams(brightness=10, sharpness=50),
            filter_name="sepia",
            overlays=(ShapeOverlay("line", 0, 0, 5, 5),),
        )

        names = [name for name, _ in build_render_stages(state)]

        self.assertEqual(names, ["adjustments", "sharpen", "filter", "overlays"])

    def test_rejects_non_state(self):
        """Test the edit state type is checked."""
        with self.assertRaises(TypeError):
            build_render_stages({"filter": "none"})


class TestRender(unittest.TestCase):
    """Test render."""

    def test_identity_render_is_a_copy(self):
        """Test an untouched state reproduces the source in a new buffer."""
        source = _checker()
        result = render(source, EditState())

        self.assertEqual(result, source)
        self.assertIsNot(result, source)

    def test_source_not_modified(self):
        """Test rendering never writes into the source."""
        source = _checker()
        original = source.copy()
        state = EditState(
            adjustments=AdjustmentParams(contrast=40, sharpness=100),
            filter_name="noir",
            overlays=(ShapeOverlay("rectangle", 1, 1, 3, 3, stroke_width=1),),
        )

        render(source, state)

        self.assertEqual(source, original)

    def test_deterministic(self):
        """Test repeated renders give identical output."""
        source = _checker()
        state = EditState(adjustments=AdjustmentParams(saturation=30, sharpness=25))

        self.assertEqual(render(source, state), render(source, state))

    def test_matches_manual_stage_order(self):
        """Test render equals adjustments, then sharpen, then filter."""
        source = _checker()
        params = AdjustmentParams(exposure=10, temperature=-20, sharpness=60)
        state = EditState(adjustments=params, filter_name="vintage")

        expected = source.copy()
        apply_adjustments(expected, params)
        apply_sharpen(expected, 0.6)
        apply_filter(expected, "vintage")

        self.assertEqual(render(source, state), expected)

    def test_rejects_non_buffer(self):
        """Test the source type is checked."""
        with self.assertRaises(TypeError):
            render("image.png", EditState())


class TestEndToEnd(unittest.TestCase):
    """Test full renders against closed-form results."""

    def test_gray_with_contrast(self):
        """Test mid-gray survives contrast 50 exactly."""
        source = PixelBuffer.new(2, 2, (128, 128, 128, 255))
        state = EditState(adjustments=AdjustmentParams(contrast=50))

        result = render(source, state)

        self.assertEqual(result, source)

    def test_sepia_on_red(self):
        """Test sepia render of pure red keeps alpha."""
        source = PixelBuffer.new(2, 2, (255, 0, 0, 255))

        result = render(source, EditState(filter_name="sepia"))

        self.assertEqual(result.pixel(1, 0), (100, 89, 69, 255))

    def test_overlay_drawn_last(self):
        """Test overlays are painted over the filtered image."""
        source = PixelBuffer.new(20, 20, (255, 255, 255, 255))
        overlay = ShapeOverlay(
            "rectangle", 5, 5, 10, 10, stroke_width=0, fill=True, fill_color="#ff0000",
        )

        result = render(source, EditState(filter_name="bw", overlays=(overlay,)))

        self.assertEqual(result.pixel(10, 10), (255, 0, 0, 255))
        self.assertEqual(result.pixel(1, 1), (255, 255, 255, 255))


class TestRenderSummary(unittest.TestCase):
    """Test get_render_summary."""

    def test_summary_lists_stages(self):
        """Test the summary names each stage in order."""
        summary = get_render_summary(EditState(filter_name="bw"))

        self.assertIn("2 stages", summary)
        self.assertIn("1. adjustments", summary)
        self.assertIn("2. filter", summary)


if __name__ == "__main__":
    unittest.main()
