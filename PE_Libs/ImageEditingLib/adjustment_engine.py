"""
Tonal adjustment chain.

Applies, per pixel and in this fixed order, each step whose parameter is
non-zero:

1. Exposure:    R,G,B *= 1 + exposure/100
2. Brightness:  R,G,B += brightness * 2.55
3. Contrast:    v = f * (v - 128) + 128, f = 259(c+255) / (255(259-c))
4. Temperature: R += t/2, B -= t/2
5. Highlights:  lum = mean(R,G,B); R,G,B += h * max(0, (lum-128)/127) * 0.5
6. Shadows:     lum = mean(R,G,B); R,G,B += s * max(0, (128-lum)/128) * 0.5
7. Saturation:  gray = 0.2989R + 0.587G + 0.114B; v = gray + (1 + s/100)(v - gray)

Intermediate values stay floating point; channels are clamped to [0, 255]
exactly once, after the last step. Alpha is never touched.

Example:
    >>> buffer = PixelBuffer.new(2, 2, (128, 128, 128, 255))
    >>> apply_adjustments(buffer, AdjustmentParams(contrast=50))
"""

import logging

import numpy as np

from PE_Libs.constants import (
    BRIGHTNESS_SCALE,
    CONTRAST_SINGULARITY,
    MIDPOINT,
    SATURATION_WEIGHTS,
    TEMPERATURE_SCALE,
    TONE_SCALE,
)
from PE_Libs.ImageEditingLib.image_models import AdjustmentParams
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer, to_uint8

logger = logging.getLogger(__name__)


def contrast_factor(contrast: float) -> float:
    """
    Return the multiplier applied around mid-gray for a contrast value.

    Raises:
        ValueError: If |contrast| >= 255 (the formula divides by zero at +255)
    """
    if not (-CONTRAST_SINGULARITY < contrast < CONTRAST_SINGULARITY):
        raise ValueError(
            f"contrast must be strictly between -{CONTRAST_SINGULARITY} and "
            f"{CONTRAST_SINGULARITY}, got {contrast}"
        )
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def apply_adjustments(buffer: PixelBuffer, params: AdjustmentParams) -> PixelBuffer:
    """
    Apply the tonal adjustment chain to every pixel.

    The buffer is modified in place and returned. When every tonal parameter
    is zero the buffer is returned untouched.

    Args:
        buffer: PixelBuffer to adjust (owned by the caller)
        params: Adjustment values; sharpness is ignored here

    Returns:
        The same PixelBuffer with adjusted R,G,B samples

    Raises:
        TypeError: If buffer is not a PixelBuffer
    """
    require_buffer(buffer)

    if (
        params.exposure == 0
        and params.brightness == 0
        and params.contrast == 0
        and params.temperature == 0
        and params.highlights == 0
        and params.shadows == 0
        and params.saturation == 0
    ):
        return buffer

    rgb = buffer.data[:, :, :3].astype(np.float64)
    r = rgb[:, :, 0]
    g = rgb[:, :, 1]
    b = rgb[:, :, 2]

    if params.exposure != 0:
        factor = 1 + params.exposure / 100
        rgb *= factor

    if params.brightness != 0:
        rgb += params.brightness * BRIGHTNESS_SCALE

    if params.contrast != 0:
        factor = contrast_factor(params.contrast)
        rgb -= MIDPOINT
        rgb *= factor
        rgb += MIDPOINT

    if params.temperature != 0:
        temp = params.temperature * TEMPERATURE_SCALE
        r += temp
        b -= temp

    if params.highlights != 0:
        luminance = (r + g + b) / 3
        highlight_factor = np.maximum(0.0, (luminance - MIDPOINT) / 127)
        rgb += (params.highlights * highlight_factor * TONE_SCALE)[:, :, np.newaxis]

    if params.shadows != 0:
        luminance = (r + g + b) / 3
        shadow_factor = np.maximum(0.0, (MIDPOINT - luminance) / 128)
        rgb += (params.shadows * shadow_factor * TONE_SCALE)[:, :, np.newaxis]

    if params.saturation != 0:
        wr, wg, wb = SATURATION_WEIGHTS
        gray = (wr * r + wg * g + wb * b)[:, :, np.newaxis]
        factor = 1 + params.saturation / 100
        rgb[:] = gray + factor * (rgb - gray)

    # Clamp once, after every step has run
    buffer.data[:, :, :3] = to_uint8(rgb)

    logger.debug(f"Applied adjustments to {buffer.width}x{buffer.height} buffer: {params}")
    return buffer
