"""
Lossless snapshot encoding for edit history.

History entries keep the pre-adjustment working image as PNG bytes, so
stepping back and forth through history never accumulates lossy
re-encoding artifacts.
"""

import io

from PE_Libs.constants import SNAPSHOT_FORMAT
from PE_Libs.pillow_compat import Image
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer


def encode_snapshot(buffer: PixelBuffer) -> bytes:
    """Encode a working image as PNG bytes."""
    require_buffer(buffer)
    stream = io.BytesIO()
    buffer.to_image().save(stream, format=SNAPSHOT_FORMAT)
    return stream.getvalue()


def decode_snapshot(image_data: bytes) -> PixelBuffer:
    """
    Decode PNG snapshot bytes back into a PixelBuffer.

    Raises:
        ValueError: If the bytes are not a decodable image
    """
    try:
        with Image.open(io.BytesIO(image_data)) as image:
            image.load()
            return PixelBuffer.from_image(image)
    except OSError as e:
        raise ValueError(f"Snapshot data is not a decodable image: {str(e)}") from e
