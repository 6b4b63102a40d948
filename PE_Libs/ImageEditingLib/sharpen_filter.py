"""
Sharpening convolution.

Applies a 3x3 unsharp-mask style kernel built from one amount value:

     0   -a    0
    -a  1+4a  -a
     0   -a    0

Neighbor reads come from a frozen copy of the input, so already sharpened
pixels never feed back into the sum. Only interior pixels are written; the
1-pixel border keeps its pre-sharpen values. Alpha is untouched.
"""

import logging

import numpy as np

from PE_Libs.constants import SHARPNESS_MAX, SHARPNESS_MIN
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer, to_uint8

logger = logging.getLogger(__name__)


def sharpen_kernel(amount: float) -> np.ndarray:
    """Return the 3x3 kernel for a sharpening amount in [0, 1]."""
    return np.array(
        [
            [0.0, -amount, 0.0],
            [-amount, 1 + 4 * amount, -amount],
            [0.0, -amount, 0.0],
        ],
        dtype=np.float64,
    )


def apply_sharpen(buffer: PixelBuffer, amount: float) -> PixelBuffer:
    """
    Sharpen R,G,B channels of the buffer in place.

    Args:
        buffer: PixelBuffer to sharpen
        amount: Kernel strength (0-1). 0 is a no-op.

    Returns:
        The same PixelBuffer

    Raises:
        ValueError: If amount is outside 0-1
        TypeError: If buffer is not a PixelBuffer
    """
    require_buffer(buffer)

    if not (0.0 <= amount <= 1.0):
        raise ValueError(f"amount must be 0-1, got {amount}")

    if amount == 0 or buffer.width < 3 or buffer.height < 3:
        return buffer

    original = buffer.data[:, :, :3].astype(np.float64)
    center = original[1:-1, 1:-1]
    up = original[:-2, 1:-1]
    down = original[2:, 1:-1]
    left = original[1:-1, :-2]
    right = original[1:-1, 2:]

    kernel = sharpen_kernel(amount)
    # Same accumulation order as a row-major kernel walk; zero diagonals skipped
    total = up * kernel[0, 1]
    total = total + left * kernel[1, 0]
    total = total + center * kernel[1, 1]
    total = total + right * kernel[1, 2]
    total = total + down * kernel[2, 1]

    buffer.data[1:-1, 1:-1, :3] = to_uint8(total)

    logger.debug(f"Sharpened {buffer.width}x{buffer.height} buffer with amount {amount}")
    return buffer


def sharpness_to_amount(sharpness: float) -> float:
    """Map the 0-100 sharpness slider onto the 0-1 kernel amount."""
    clamped = max(float(SHARPNESS_MIN), min(float(SHARPNESS_MAX), float(sharpness)))
    return clamped / SHARPNESS_MAX
