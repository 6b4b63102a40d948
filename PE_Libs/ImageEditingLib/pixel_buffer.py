"""
Pixel buffer for the photo editor core.

A PixelBuffer is a dense width x height grid of straight (non-premultiplied)
RGBA samples, 8 bits per channel, row-major with no padding. The samples are
held in a NumPy array of shape (height, width, 4) so the flat sample count is
always width * height * 4.

Classes:
    PixelBuffer: RGBA raster owned by whichever pipeline stage holds it
"""

from typing import Any, Tuple

import numpy as np

from PE_Libs.pillow_compat import Image
from PE_Libs.ImageEditingLib.image_models import RgbaColor

CHANNELS = 4


class PixelBuffer:
    """
    RGBA raster passed between pipeline stages.

    Stages either mutate ``data`` in place when they own the only reference,
    or build and return a fresh buffer. Callers must not assume an input
    buffer survives a stage unchanged.

    Example:
        >>> buffer = PixelBuffer.new(2, 2, (128, 128, 128, 255))
        >>> buffer.size
        (2, 2)
    """

    __slots__ = ("data",)

    def __init__(self, data: np.ndarray):
        """
        Wrap an existing sample array.

        Args:
            data: uint8 array of shape (height, width, 4)

        Raises:
            TypeError: If data is not a NumPy array
            ValueError: If dtype, rank, channel count or extents are invalid
        """
        if not isinstance(data, np.ndarray):
            raise TypeError(f"Expected numpy array, got {type(data)}")
        if data.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {data.dtype}")
        if data.ndim != 3 or data.shape[2] != CHANNELS:
            raise ValueError(
                f"Pixel data must have shape (height, width, {CHANNELS}), got {data.shape}"
            )
        if data.shape[0] < 1 or data.shape[1] < 1:
            raise ValueError(
                f"Width and height must be positive, got {data.shape[1]}x{data.shape[0]}"
            )
        self.data = np.ascontiguousarray(data)

    @classmethod
    def new(cls, width: int, height: int, fill: RgbaColor = (0, 0, 0, 0)) -> "PixelBuffer":
        """Create a buffer of the given size filled with one color."""
        width = int(width)
        height = int(height)
        if width < 1 or height < 1:
            raise ValueError(f"Width and height must be positive, got {width}x{height}")
        data = np.empty((height, width, CHANNELS), dtype=np.uint8)
        data[:, :] = fill
        return cls(data)

    @classmethod
    def from_bytes(cls, width: int, height: int, raw: bytes) -> "PixelBuffer":
        """
        Build a buffer from a flat RGBA byte string.

        Raises:
            ValueError: If len(raw) != width * height * 4
        """
        expected = int(width) * int(height) * CHANNELS
        if len(raw) != expected:
            raise ValueError(
                f"Expected {expected} bytes for {width}x{height} RGBA, got {len(raw)}"
            )
        data = np.frombuffer(raw, dtype=np.uint8).reshape((int(height), int(width), CHANNELS))
        return cls(data.copy())

    @classmethod
    def from_image(cls, image: Any) -> "PixelBuffer":
        """
        Decode a PIL Image into a buffer.

        Any mode is accepted and converted to straight RGBA.
        """
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(np.array(image, dtype=np.uint8))

    def to_image(self) -> Any:
        """Return an RGBA PIL Image copy of this buffer."""
        return Image.fromarray(self.data.copy())

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.data.copy())

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> RgbaColor:
        r, g, b, a = (int(value) for value in self.data[y, x])
        return r, g, b, a

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.data.shape == other.data.shape and bool(np.array_equal(self.data, other.data))

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def require_buffer(buffer: Any) -> PixelBuffer:
    """Raise TypeError unless buffer is a PixelBuffer."""
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")
    return buffer


def to_uint8(values: np.ndarray) -> np.ndarray:
    """
    Quantize float channel values into 8-bit samples.

    Values are clamped to [0, 255] and rounded half-to-even, the same way an
    8-bit clamped sample store converts floating-point writes.
    """
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)
