"""
Export encoding for rendered images.

Encodes a rendered PixelBuffer as PNG (lossless, alpha kept) or as JPEG/WebP
(lossy, quality 1-100, alpha dropped). PixelBuffers always hold straight,
in-range 8-bit RGBA, so no un-premultiply or clamping pass is needed before
handing samples to the encoder.

Classes:
    ExportConfig: Format + quality for an export

Functions:
    encode_image: Encode a buffer to bytes
    save_image: Encode a buffer and write it to disk
    default_export_filename: Download filename for a format
"""

import io
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from PE_Libs.constants import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_EXPORT_QUALITY,
    DEFAULT_EXPORT_STEM,
    EXPORT_EXTENSIONS,
    LOSSY_EXPORT_FORMATS,
    SUPPORTED_EXPORT_FORMATS,
)
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer

logger = logging.getLogger(__name__)


def normalize_format(save_format: str) -> str:
    """Upper-case a format name and map 'JPG' to Pillow's 'JPEG'."""
    normalized = str(save_format).strip().upper()
    if normalized == "JPG":
        normalized = "JPEG"
    if normalized not in SUPPORTED_EXPORT_FORMATS:
        raise ValueError(
            f"Unsupported export format: {save_format}. "
            f"Valid formats: {', '.join(SUPPORTED_EXPORT_FORMATS)}"
        )
    return normalized


@dataclass
class ExportConfig:
    """Configuration for an export.

    Attributes:
        save_format: PNG, JPEG (or JPG) or WEBP (default: PNG)
        quality: Lossy quality 1-100 (default: 90, ignored for PNG)
    """
    save_format: str = DEFAULT_EXPORT_FORMAT
    quality: int = DEFAULT_EXPORT_QUALITY

    def __post_init__(self):
        self.save_format = normalize_format(self.save_format)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)

    @property
    def is_lossy(self) -> bool:
        return self.save_format in LOSSY_EXPORT_FORMATS

    def get_save_kwargs(self) -> Dict[str, Any]:
        """Get PIL Image.save() kwargs based on format."""
        kwargs: Dict[str, Any] = {"format": self.save_format}
        if self.is_lossy:
            kwargs["quality"] = max(1, min(100, int(self.quality)))
        return kwargs


def default_export_filename(save_format: str = DEFAULT_EXPORT_FORMAT) -> str:
    """Return e.g. 'photeditor-export.jpg' for JPEG."""
    return f"{DEFAULT_EXPORT_STEM}.{EXPORT_EXTENSIONS[normalize_format(save_format)]}"


def _prepare_image(buffer: PixelBuffer, config: ExportConfig) -> Any:
    image = buffer.to_image()
    # Lossy formats are exported without alpha
    if config.is_lossy:
        image = image.convert("RGB")
    return image


def encode_image(buffer: PixelBuffer, config: Optional[ExportConfig] = None) -> bytes:
    """
    Encode a rendered buffer.

    Args:
        buffer: Rendered PixelBuffer
        config: Export format/quality (default: PNG)

    Returns:
        Encoded image bytes
    """
    require_buffer(buffer)
    config = config or ExportConfig()

    stream = io.BytesIO()
    _prepare_image(buffer, config).save(stream, **config.get_save_kwargs())
    return stream.getvalue()


def save_image(
    buffer: PixelBuffer,
    output_path: Path,
    config: Optional[ExportConfig] = None,
    overwrite: bool = False,
    create_directories: bool = True,
) -> Path:
    """
    Encode a rendered buffer and write it to disk.

    Returns:
        Path where the image was saved

    Raises:
        ValueError: If the file exists and overwrite=False
        OSError: If the file cannot be written
    """
    require_buffer(buffer)
    config = config or ExportConfig()
    output_file = Path(output_path)

    if create_directories:
        output_file.parent.mkdir(parents=True, exist_ok=True)

    if output_file.exists() and not overwrite:
        raise ValueError(
            f"Output file already exists: {output_file}. "
            f"Set overwrite=True to replace."
        )

    try:
        _prepare_image(buffer, config).save(output_file, **config.get_save_kwargs())
    except OSError as e:
        raise OSError(f"Failed to save image to {output_file}: {str(e)}") from e

    logger.info(f"Exported {buffer.width}x{buffer.height} image to {output_file} ({config.save_format})")
    return output_file
