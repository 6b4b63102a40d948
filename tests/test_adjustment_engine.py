"""
Tests for the tonal adjustment chain.

Tests cover:
- Identity behavior for zero parameters
- Each adjustment step in isolation
- Contrast closed form and its singularity
- Clamping only after the final step
- Alpha preservation
"""

import unittest

import numpy as np

from PE_Libs.ImageEditingLib.adjustment_engine import apply_adjustments, contrast_factor
from PE_Libs.ImageEditingLib.image_models import AdjustmentParams
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer


def _solid(r, g, b, a=255):
    return PixelBuffer.new(2, 2, (r, g, b, a))


class TestIdentity(unittest.TestCase):
    """Zero parameters must leave pixels untouched."""

    def test_zero_params_is_identity(self):
        """Test all-zero adjustments on varied data."""
        data = np.arange(4 * 5 * 4, dtype=np.uint8).reshape((4, 5, 4))
        buffer = PixelBuffer(data.copy())

        apply_adjustments(buffer, AdjustmentParams())

        np.testing.assert_array_equal(buffer.data, data)

    def test_sharpness_is_ignored(self):
        """Test sharpness alone does not change the chain output."""
        buffer = _solid(10, 20, 30)
        apply_adjustments(buffer, AdjustmentParams(sharpness=80))
        self.assertEqual(buffer.pixel(0, 0), (10, 20, 30, 255))

    def test_returns_same_buffer(self):
        """Test adjustments are applied in place."""
        buffer = _solid(50, 50, 50)
        result = apply_adjustments(buffer, AdjustmentParams(brightness=10))
        self.assertIs(result, buffer)


class TestSteps(unittest.TestCase):
    """Test individual adjustment steps."""

    def test_exposure(self):
        """Test exposure scales channels."""
        buffer = _solid(100, 40, 0)
        apply_adjustments(buffer, AdjustmentParams(exposure=50))
        self.assertEqual(buffer.pixel(0, 0), (150, 60, 0, 255))

    def test_brightness_offsets_and_clamps(self):
        """Test brightness offsets channels and clamps to range."""
        buffer = _solid(200, 100, 0)
        apply_adjustments(buffer, AdjustmentParams(brightness=100))
        self.assertEqual(buffer.pixel(0, 0), (255, 255, 255, 255))

        buffer = _solid(200, 100, 0)
        apply_adjustments(buffer, AdjustmentParams(brightness=-100))
        self.assertEqual(buffer.pixel(0, 0), (0, 0, 0, 255))

    def test_contrast_keeps_midpoint(self):
        """Test mid-gray is a fixed point of contrast."""
        buffer = _solid(128, 128, 128)
        apply_adjustments(buffer, AdjustmentParams(contrast=50))
        self.assertEqual(buffer.pixel(1, 1), (128, 128, 128, 255))

    def test_contrast_closed_form(self):
        """Test contrast 50 maps 200 to round(72 * f + 128)."""
        factor = contrast_factor(50)
        self.assertAlmostEqual(factor, 78995 / 53295)

        buffer = _solid(200, 200, 200)
        apply_adjustments(buffer, AdjustmentParams(contrast=50))
        self.assertEqual(buffer.pixel(0, 0)[0], 235)

    def test_contrast_factor_identity(self):
        """Test zero contrast gives a factor of one."""
        self.assertAlmostEqual(contrast_factor(0), 1.0)

    def test_contrast_singularity_rejected(self):
        """Test the divide-by-zero boundary is rejected."""
        with self.assertRaises(ValueError):
            contrast_factor(255)
        with self.assertRaises(ValueError):
            contrast_factor(-255)

    def test_temperature(self):
        """Test temperature warms red and cools blue."""
        buffer = _solid(100, 100, 100)
        apply_adjustments(buffer, AdjustmentParams(temperature=20))
        self.assertEqual(buffer.pixel(0, 0), (110, 100, 90, 255))

    def test_highlights_only_affect_bright_pixels(self):
        """Test highlights leave dark pixels and lift bright ones."""
        dark = _solid(60, 60, 60)
        apply_adjustments(dark, AdjustmentParams(highlights=50))
        self.assertEqual(dark.pixel(0, 0), (60, 60, 60, 255))

        bright = _solid(200, 200, 200)
        apply_adjustments(bright, AdjustmentParams(highlights=50))
        # 200 + 50 * (72 / 127) * 0.5 = 214.17
        self.assertEqual(bright.pixel(0, 0), (214, 214, 214, 255))

    def test_shadows_only_affect_dark_pixels(self):
        """Test shadows lift dark pixels and leave bright ones."""
        bright = _solid(200, 200, 200)
        apply_adjustments(bright, AdjustmentParams(shadows=50))
        self.assertEqual(bright.pixel(0, 0), (200, 200, 200, 255))

        dark = _solid(64, 64, 64)
        apply_adjustments(dark, AdjustmentParams(shadows=50))
        # 64 + 50 * (64 / 128) * 0.5 = 76.5
        self.assertEqual(dark.pixel(0, 0), (76, 76, 76, 255))

    def test_full_desaturation(self):
        """Test saturation -100 collapses color to weighted gray."""
        buffer = _solid(255, 0, 0)
        apply_adjustments(buffer, AdjustmentParams(saturation=-100))
        self.assertEqual(buffer.pixel(0, 0), (76, 76, 76, 255))


class TestClampingAndAlpha(unittest.TestCase):
    """Test clamp timing and alpha handling."""

    def test_clamps_once_at_end(self):
        """Test out-of-range intermediates survive until the last step."""
        buffer = _solid(200, 200, 200)
        # 200 * 2 = 400, then 400 - 255 = 145; clamping after exposure would give 0
        apply_adjustments(buffer, AdjustmentParams(exposure=100, brightness=-100))
        self.assertEqual(buffer.pixel(0, 0)[:3], (145, 145, 145))

    def test_extreme_settings_saturate(self):
        """Test out-of-range results stick at 0 and 255 instead of wrapping."""
        buffer = PixelBuffer.new(2, 1, (0, 0, 0, 255))
        buffer.data[0, 1, :3] = 255

        # Black ends near -162 and white near 416 before clamping
        apply_adjustments(buffer, AdjustmentParams(contrast=100))

        self.assertEqual(buffer.pixel(0, 0), (0, 0, 0, 255))
        self.assertEqual(buffer.pixel(1, 0), (255, 255, 255, 255))

    def test_brightness_saturates_both_ends(self):
        """Test full brightness pins light and dark pixels to the limits."""
        bright = _solid(250, 250, 250)
        dark = _solid(5, 5, 5)

        apply_adjustments(bright, AdjustmentParams(brightness=100))
        apply_adjustments(dark, AdjustmentParams(brightness=-100))

        self.assertEqual(bright.pixel(0, 0), (255, 255, 255, 255))
        self.assertEqual(dark.pixel(0, 0), (0, 0, 0, 255))

    def test_matches_clipped_float_reference(self):
        """Test every sample equals the float result clipped to [0, 255]."""
        data = np.arange(256, dtype=np.uint8).repeat(4).reshape((16, 16, 4))
        data[:, :, 3] = 255
        buffer = PixelBuffer(data.copy())

        apply_adjustments(buffer, AdjustmentParams(contrast=100))

        expected = data[:, :, :3].astype(np.float64)
        expected = (expected - 128) * contrast_factor(100) + 128
        expected = np.rint(np.clip(expected, 0.0, 255.0)).astype(np.uint8)
        np.testing.assert_array_equal(buffer.data[:, :, :3], expected)
        self.assertEqual(buffer.data[0, 0, 0], 0)
        self.assertEqual(buffer.data[15, 15, 0], 255)

    def test_alpha_untouched(self):
        """Test alpha passes through every step unchanged."""
        buffer = _solid(100, 150, 200, a=77)
        params = AdjustmentParams(
            exposure=10, brightness=10, contrast=10, temperature=10,
            highlights=10, shadows=10, saturation=10,
        )

        apply_adjustments(buffer, params)

        self.assertTrue(np.all(buffer.data[:, :, 3] == 77))


if __name__ == "__main__":
    unittest.main()
