"""
Unit tests for the image_models module.

Tests validation and dictionary conversion of the edit records.
"""

import pytest

from PE_Libs.ImageEditingLib.image_models import (
    AdjustmentParams,
    EditState,
    ShapeOverlay,
    TextOverlay,
    overlay_from_dict,
    validate_filter_name,
)


class TestAdjustmentParams:
    """Tests for AdjustmentParams."""

    def test_defaults_are_zero(self):
        """Every slider should start at zero."""
        params = AdjustmentParams()
        assert all(value == 0 for value in params.to_dict().values())

    def test_rejects_contrast_singularity(self):
        """Contrast of +/-255 or beyond should be rejected."""
        with pytest.raises(ValueError):
            AdjustmentParams(contrast=255)
        with pytest.raises(ValueError):
            AdjustmentParams(contrast=-300)

    def test_updated_replaces_named_fields(self):
        """Should return a new instance with only the named fields changed."""
        params = AdjustmentParams(exposure=10)
        changed = params.updated(contrast=25)

        assert changed.exposure == 10
        assert changed.contrast == 25
        assert params.contrast == 0

    def test_updated_rejects_unknown_field(self):
        """Should reject names that are not adjustments."""
        with pytest.raises(ValueError, match="Unknown adjustment"):
            AdjustmentParams().updated(gamma=5)

    def test_from_dict_ignores_extra_keys(self):
        """Should drop keys that are not dataclass fields."""
        params = AdjustmentParams.from_dict({"brightness": 12, "unknown": 1})
        assert params.brightness == 12


class TestOverlays:
    """Tests for TextOverlay and ShapeOverlay."""

    def test_shape_rejects_unknown_kind(self):
        """Should reject shape kinds that cannot be drawn."""
        with pytest.raises(ValueError, match="Unknown shape kind"):
            ShapeOverlay(kind="star", x=0, y=0, width=10, height=10)

    def test_shape_rejects_negative_stroke(self):
        """Should reject negative stroke widths."""
        with pytest.raises(ValueError):
            ShapeOverlay(kind="line", x=0, y=0, width=10, height=10, stroke_width=-1)

    def test_to_dict_is_tagged(self):
        """Dictionary form should carry the overlay type."""
        assert TextOverlay("hi", 1, 2).to_dict()["type"] == "text"
        assert ShapeOverlay("circle", 0, 0, 5, 5).to_dict()["type"] == "shape"

    def test_overlay_from_dict(self):
        """Should rebuild the matching overlay class from its dict."""
        shape = ShapeOverlay("arrow", 1, 2, 30, 40, stroke_width=3)
        text = TextOverlay("Hello", 10, 20, bold=True)

        assert overlay_from_dict(shape.to_dict()) == shape
        assert overlay_from_dict(text.to_dict()) == text

    def test_overlay_from_dict_unknown_type(self):
        """Should reject unknown overlay tags."""
        with pytest.raises(ValueError):
            overlay_from_dict({"type": "sticker"})


class TestEditState:
    """Tests for EditState."""

    def test_list_overlays_become_tuple(self):
        """Overlays passed as a list should be frozen into a tuple."""
        overlay = TextOverlay("a", 0, 0)
        state = EditState(overlays=[overlay])
        assert state.overlays == (overlay,)

    def test_rejects_unknown_filter(self):
        """Should reject filter names outside the filter set."""
        with pytest.raises(ValueError, match="Unsupported filter"):
            EditState(filter_name="glow")

    def test_rejects_non_overlay(self):
        """Should reject overlay entries of the wrong type."""
        with pytest.raises(TypeError):
            EditState(overlays=("text",))

    def test_dict_conversion(self):
        """from_dict should rebuild the state written by to_dict."""
        state = EditState(
            adjustments=AdjustmentParams(contrast=20, sharpness=40),
            filter_name="sepia",
            overlays=(ShapeOverlay("rectangle", 5, 5, 10, 10), TextOverlay("x", 3, 4)),
        )
        data = state.to_dict()

        assert data["filter"] == "sepia"
        assert EditState.from_dict(data) == state

    def test_validate_filter_name(self):
        """Should return valid names unchanged."""
        assert validate_filter_name("noir") == "noir"
