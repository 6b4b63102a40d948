"""
Named whole-image color filters.

Each filter exists in two forms that are intentionally not identical:

- Pixel math (`apply_filter`): a fixed per-pixel linear/affine remap of
  R,G,B run as the final raster stage of a render. This is what the render
  pipeline applies for an EditState's filter.
- Adjustment preset (`FILTER_PRESETS`, `apply_preset_to_adjustments`): a set
  of AdjustmentParams values approximating the same look through the
  adjustment chain. This is a preset loader for the UI sliders; it never
  runs implicitly.

Functions:
    apply_filter: Remap every pixel of a buffer through a named filter
    list_filter_names: All filter names, in menu order
    get_filter_preset: Display name + adjustment values for a filter
    apply_preset_to_adjustments: Merge a filter's preset into adjustments
"""

import logging
from typing import Any, Dict, List

import numpy as np

from PE_Libs.constants import LUMA_WEIGHTS, MIDPOINT
from PE_Libs.ImageEditingLib.image_models import (
    FILTER_NAMES,
    AdjustmentParams,
    FilterName,
    validate_filter_name,
)
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer, to_uint8

logger = logging.getLogger(__name__)

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float64,
)

NOIR_CONTRAST = 1.4
NOIR_BLACK_THRESHOLD = 40
DRAMATIC_CONTRAST = 1.3
VIBRANT_BOOST = 1.5


FILTER_PRESETS: Dict[str, Dict[str, Any]] = {
    "none": {"name": "Original", "adjustments": {}},
    "vintage": {
        "name": "Vintage",
        "adjustments": {"saturation": -20, "contrast": 10, "temperature": 20},
    },
    "bw": {
        "name": "Black & White",
        "adjustments": {"saturation": -100, "contrast": 10},
    },
    "sepia": {
        "name": "Sepia",
        "adjustments": {"saturation": -50, "temperature": 40},
    },
    "vibrant": {
        "name": "Vibrant",
        "adjustments": {"saturation": 40, "contrast": 15},
    },
    "warm": {
        "name": "Warm",
        "adjustments": {"temperature": 30, "saturation": 10},
    },
    "cool": {
        "name": "Cool",
        "adjustments": {"temperature": -30, "saturation": 5},
    },
    "dramatic": {
        "name": "Dramatic",
        "adjustments": {"contrast": 40, "saturation": -10, "shadows": -20},
    },
    "fade": {
        "name": "Fade",
        "adjustments": {"contrast": -20, "brightness": 10, "saturation": -15},
    },
    "noir": {
        "name": "Noir",
        "adjustments": {"saturation": -100, "contrast": 50, "shadows": -30},
    },
}


# ============================================================================
# Pixel math
# ============================================================================

def _luma(rgb: np.ndarray) -> np.ndarray:
    wr, wg, wb = LUMA_WEIGHTS
    return rgb[:, :, 0] * wr + rgb[:, :, 1] * wg + rgb[:, :, 2] * wb


def _gray_to_rgb(gray: np.ndarray) -> np.ndarray:
    return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


def _vintage(rgb: np.ndarray) -> np.ndarray:
    out = np.empty_like(rgb)
    out[:, :, 0] = rgb[:, :, 0] * 1.1 + 20
    out[:, :, 1] = rgb[:, :, 1] * 0.9
    out[:, :, 2] = rgb[:, :, 2] * 0.8
    return out


def _sepia(rgb: np.ndarray) -> np.ndarray:
    r = rgb[:, :, 0]
    g = rgb[:, :, 1]
    b = rgb[:, :, 2]
    out = np.empty_like(rgb)
    for channel, (wr, wg, wb) in enumerate(SEPIA_MATRIX):
        out[:, :, channel] = r * wr + g * wg + b * wb
    return out


def _vibrant(rgb: np.ndarray) -> np.ndarray:
    gray = ((rgb[:, :, 0] + rgb[:, :, 1] + rgb[:, :, 2]) / 3)[:, :, np.newaxis]
    return gray + (rgb - gray) * VIBRANT_BOOST


def _scale_channels(rgb: np.ndarray, red: float, green: float, blue: float) -> np.ndarray:
    return rgb * np.array([red, green, blue], dtype=np.float64)


def _dramatic(rgb: np.ndarray) -> np.ndarray:
    gray = _luma(rgb)[:, :, np.newaxis]
    return DRAMATIC_CONTRAST * (rgb * 0.9 + gray * 0.1 - MIDPOINT) + MIDPOINT


def _noir(rgb: np.ndarray) -> np.ndarray:
    gray = _luma(rgb)
    gray = np.clip(NOIR_CONTRAST * (gray - MIDPOINT) + MIDPOINT, 0.0, 255.0)
    gray = np.where(gray < NOIR_BLACK_THRESHOLD, gray * 0.5, gray)
    return _gray_to_rgb(gray)


def apply_filter(buffer: PixelBuffer, filter_name: FilterName) -> PixelBuffer:
    """
    Apply a named color filter to every pixel in place.

    Args:
        buffer: PixelBuffer to filter
        filter_name: One of FILTER_NAMES; 'none' is a no-op

    Returns:
        The same PixelBuffer with remapped R,G,B (alpha unchanged)

    Raises:
        ValueError: If filter_name is unknown
        TypeError: If buffer is not a PixelBuffer
    """
    require_buffer(buffer)
    validate_filter_name(filter_name)

    if filter_name == "none":
        return buffer

    rgb = buffer.data[:, :, :3].astype(np.float64)

    if filter_name == "vintage":
        result = _vintage(rgb)
    elif filter_name == "bw":
        result = _gray_to_rgb(_luma(rgb))
    elif filter_name == "sepia":
        result = _sepia(rgb)
    elif filter_name == "vibrant":
        result = _vibrant(rgb)
    elif filter_name == "warm":
        result = _scale_channels(rgb, 1.1, 1.05, 0.9)
    elif filter_name == "cool":
        result = _scale_channels(rgb, 0.9, 1.05, 1.1)
    elif filter_name == "dramatic":
        result = _dramatic(rgb)
    elif filter_name == "fade":
        result = rgb * 0.85 + 30
    else:
        result = _noir(rgb)

    buffer.data[:, :, :3] = to_uint8(result)

    logger.debug(f"Applied '{filter_name}' filter to {buffer.width}x{buffer.height} buffer")
    return buffer


# ============================================================================
# Adjustment presets
# ============================================================================

def list_filter_names() -> List[str]:
    return list(FILTER_NAMES)


def get_filter_preset(filter_name: str) -> Dict[str, Any]:
    """
    Get the preset record for a filter.

    Unknown names fall back to the 'none' preset, as the filter menu does.

    Returns:
        Dict with 'name' (display name) and 'adjustments' (field -> value)
    """
    preset = FILTER_PRESETS.get(filter_name, FILTER_PRESETS["none"])
    return {"name": preset["name"], "adjustments": dict(preset["adjustments"])}


def apply_preset_to_adjustments(
    filter_name: str,
    current: AdjustmentParams,
) -> AdjustmentParams:
    """
    Merge a filter's preset values over the current adjustments.

    Fields named by the preset are replaced; all other fields keep their
    current values.
    """
    preset = get_filter_preset(filter_name)
    return current.updated(**preset["adjustments"])
