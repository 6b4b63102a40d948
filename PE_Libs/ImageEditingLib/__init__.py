"""
ImageEditingLib - Pixel-processing stages and edit records

This module provides the pixel buffer, the declarative edit models, and the
raster stages (adjustments, sharpening, color filters, geometry, overlays,
export encoding) used by the render pipeline.
"""

from PE_Libs.ImageEditingLib.image_models import (
    AdjustmentParams,
    EditState,
    RgbaColor,
    ShapeOverlay,
    TextOverlay,
    overlay_from_dict,
)
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PE_Libs.ImageEditingLib.adjustment_engine import apply_adjustments, contrast_factor
from PE_Libs.ImageEditingLib.sharpen_filter import apply_sharpen, sharpness_to_amount
from PE_Libs.ImageEditingLib.color_filter import (
    FILTER_PRESETS,
    apply_filter,
    apply_preset_to_adjustments,
    get_filter_preset,
    list_filter_names,
)
from PE_Libs.ImageEditingLib.geometry_ops import crop_buffer, flip_buffer, rotate_buffer
from PE_Libs.ImageEditingLib.overlay_compositor import (
    create_shape_overlay,
    create_text_overlay,
    draw_overlays,
    scale_stroke_width,
)
from PE_Libs.ImageEditingLib.export_ops import ExportConfig, encode_image, save_image

__all__ = [
    "AdjustmentParams",
    "EditState",
    "RgbaColor",
    "ShapeOverlay",
    "TextOverlay",
    "overlay_from_dict",
    "PixelBuffer",
    "apply_adjustments",
    "contrast_factor",
    "apply_sharpen",
    "sharpness_to_amount",
    "FILTER_PRESETS",
    "apply_filter",
    "apply_preset_to_adjustments",
    "get_filter_preset",
    "list_filter_names",
    "crop_buffer",
    "flip_buffer",
    "rotate_buffer",
    "create_shape_overlay",
    "create_text_overlay",
    "draw_overlays",
    "scale_stroke_width",
    "ExportConfig",
    "encode_image",
    "save_image",
]
