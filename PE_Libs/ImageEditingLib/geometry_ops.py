"""
Geometric transforms: rotate, flip and crop.

Every operation returns a fresh PixelBuffer and leaves its input untouched.

Functions:
    rotated_canvas_size: Bounding-box size of a rotated rectangle
    rotate_buffer: Rotate by an arbitrary angle, growing the canvas
    flip_buffer: Mirror horizontally or vertically
    crop_buffer: Extract a rounded, in-bounds rectangle
"""

import logging
import math
from typing import Tuple

import numpy as np

from PE_Libs.pillow_compat import Image
from PE_Libs.ImageEditingLib.image_models import FLIP_AXES, FlipAxis
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer

logger = logging.getLogger(__name__)

# Clockwise quarter turns mapped to Pillow's counter-clockwise transposes
_QUARTER_TURNS = {
    1: Image.Transpose.ROTATE_270,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_90,
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rotated_canvas_size(width: int, height: int, degrees: float) -> Tuple[int, int]:
    """
    Size of the axis-aligned box holding a width x height rectangle rotated
    by degrees.

    newW = W|cos| + H|sin|, newH = W|sin| + H|cos|, truncated to whole pixels.
    """
    radians = math.radians(degrees)
    sin = abs(math.sin(radians))
    cos = abs(math.cos(radians))
    new_width = width * cos + height * sin
    new_height = width * sin + height * cos
    return max(1, int(new_width)), max(1, int(new_height))


def rotate_buffer(buffer: PixelBuffer, degrees: float) -> PixelBuffer:
    """
    Rotate clockwise about the image center by any angle.

    The output canvas is sized to the rotated bounding box so nothing is
    clipped; uncovered corners are transparent. Multiples of 90 degrees are
    exact pixel permutations; other angles are resampled bilinearly.

    Args:
        buffer: Source PixelBuffer (not modified)
        degrees: Clockwise rotation in degrees (negative = counter-clockwise)

    Returns:
        New PixelBuffer with the rotated image
    """
    require_buffer(buffer)

    degrees = float(degrees)
    quarter, remainder = divmod(degrees, 90.0)
    if remainder == 0:
        turns = int(quarter) % 4
        if turns == 0:
            return buffer.copy()
        rotated = buffer.to_image().transpose(_QUARTER_TURNS[turns])
        result = PixelBuffer.from_image(rotated)
        logger.debug(f"Rotated {buffer.size} by {degrees} degrees -> {result.size}")
        return result

    width, height = buffer.size
    new_width, new_height = rotated_canvas_size(width, height, degrees)

    # Inverse map: output pixel -> source pixel, both about their centers
    radians = math.radians(degrees)
    cos = math.cos(radians)
    sin = math.sin(radians)
    out_cx = new_width / 2.0
    out_cy = new_height / 2.0
    src_cx = width / 2.0
    src_cy = height / 2.0
    matrix = (
        cos, sin, src_cx - cos * out_cx - sin * out_cy,
        -sin, cos, src_cy + sin * out_cx - cos * out_cy,
    )

    rotated = buffer.to_image().transform(
        (new_width, new_height),
        Image.Transform.AFFINE,
        data=matrix,
        resample=Image.Resampling.BILINEAR,
        fillcolor=(0, 0, 0, 0),
    )
    result = PixelBuffer.from_image(rotated)
    logger.debug(f"Rotated {buffer.size} by {degrees} degrees -> {result.size}")
    return result


def flip_buffer(buffer: PixelBuffer, axis: FlipAxis) -> PixelBuffer:
    """
    Mirror the image about its vertical ('horizontal' flip) or horizontal
    ('vertical' flip) center line.

    Raises:
        ValueError: If axis is not 'horizontal' or 'vertical'
    """
    require_buffer(buffer)

    if axis == "horizontal":
        data = buffer.data[:, ::-1]
    elif axis == "vertical":
        data = buffer.data[::-1, :]
    else:
        raise ValueError(f"Unknown flip axis: {axis}. Valid axes: {', '.join(FLIP_AXES)}")

    return PixelBuffer(np.array(data, copy=True))


def crop_buffer(
    buffer: PixelBuffer,
    x: float,
    y: float,
    width: float,
    height: float,
) -> PixelBuffer:
    """
    Extract a rectangle from the buffer.

    Bounds are rounded to whole pixels first. The caller is responsible for
    clamping the rectangle to the image; an out-of-bounds or empty rectangle
    is rejected rather than silently producing a buffer of the wrong size.

    Returns:
        New PixelBuffer of exactly (round(width), round(height))

    Raises:
        ValueError: If the rounded rectangle is empty or exceeds the source
    """
    require_buffer(buffer)

    left = _round_half_up(x)
    top = _round_half_up(y)
    crop_width = _round_half_up(width)
    crop_height = _round_half_up(height)

    if crop_width < 1 or crop_height < 1:
        raise ValueError(f"Crop size must be positive, got {crop_width}x{crop_height}")

    if (
        left < 0
        or top < 0
        or left + crop_width > buffer.width
        or top + crop_height > buffer.height
    ):
        raise ValueError(
            f"Crop rectangle ({left}, {top}, {crop_width}x{crop_height}) "
            f"lies outside the {buffer.width}x{buffer.height} source"
        )

    data = buffer.data[top:top + crop_height, left:left + crop_width]
    return PixelBuffer(np.array(data, copy=True))
