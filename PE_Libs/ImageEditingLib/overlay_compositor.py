"""
Vector overlay compositor.

Paints text and shape overlays onto a rendered PixelBuffer using Pillow's
ImageDraw. Each overlay is drawn on its own transparent layer and
alpha-composited onto the image, so translucent stroke/fill colors blend
the same way regardless of what was painted before.

Paint order is list order: later overlays are drawn over earlier ones.

Text:
    outline (optional, stroked in the text color) -> drop shadow
    (50% black, blur 4, offset (2, 2), always on) -> filled glyphs.
    Text is centered on (x, y).

Shapes:
    rectangle/circle: fill (when enabled) then stroke on top.
    arrow: horizontal shaft through the box's vertical center, then two
    head strokes 20 units long at +/-30 degrees from atan2 of the shaft.
    line: a single stroke from (x, y) to (x + width, y + height).

Example:
    >>> overlays = [create_shape_overlay(800, 600, kind="arrow")]
    >>> draw_overlays(buffer, overlays)
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Tuple

import numpy as np

from PE_Libs.constants import (
    ARROW_HEAD_ANGLE,
    ARROW_HEAD_LENGTH,
    DEFAULT_SHAPE_SETTINGS,
    DEFAULT_TEXT_SETTINGS,
    STROKE_REFERENCE_SIZE,
    TEXT_FONT_FILES,
    TEXT_OUTLINE_WIDTH,
    TEXT_SHADOW_BLUR,
    TEXT_SHADOW_COLOR,
    TEXT_SHADOW_OFFSET,
)
from PE_Libs.pillow_compat import Image, ImageColor, ImageDraw, ImageFilter, ImageFont
from PE_Libs.ImageEditingLib.image_models import (
    Overlay,
    RgbaColor,
    ShapeOverlay,
    TextOverlay,
)
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


# ============================================================================
# Overlay construction
# ============================================================================

def scale_stroke_width(requested_width: int, image_width: int, image_height: int) -> int:
    """
    Scale a stroke width up for large images.

    Returns max(requested, round(requested * max(W, H) / 1000)), so images up
    to 1000px keep the requested width and larger ones get proportionally
    thicker strokes.
    """
    image_scale = max(image_width, image_height) / STROKE_REFERENCE_SIZE
    scaled = int(math.floor(requested_width * image_scale + 0.5))
    return max(int(requested_width), scaled)


def create_text_overlay(
    image_width: int,
    image_height: int,
    text: str,
    **text_settings: Any,
) -> TextOverlay:
    """
    Create a text overlay centered on the image.

    Args:
        image_width: Current working image width
        image_height: Current working image height
        text: Text to draw (surrounding whitespace is stripped)
        **text_settings: font_size, color, bold, italic, outline

    Raises:
        ValueError: If text is blank
    """
    text = str(text).strip()
    if not text:
        raise ValueError("Text overlay requires non-empty text")

    settings: Dict[str, Any] = dict(DEFAULT_TEXT_SETTINGS)
    settings.update(text_settings)
    return TextOverlay(
        text=text,
        x=image_width / 2,
        y=image_height / 2,
        **settings,
    )


def create_shape_overlay(
    image_width: int,
    image_height: int,
    **shape_settings: Any,
) -> ShapeOverlay:
    """
    Create a shape overlay covering the middle of the image.

    The shape box starts at (W/4, H/4) and spans (W/2, H/2). The requested
    stroke width is scaled up for images larger than 1000px.

    Args:
        image_width: Current working image width
        image_height: Current working image height
        **shape_settings: kind, stroke_width, stroke_color, fill, fill_color
    """
    settings: Dict[str, Any] = dict(DEFAULT_SHAPE_SETTINGS)
    settings.update(shape_settings)
    settings["stroke_width"] = scale_stroke_width(
        settings["stroke_width"], image_width, image_height
    )
    return ShapeOverlay(
        x=image_width / 4,
        y=image_height / 4,
        width=image_width / 2,
        height=image_height / 2,
        **settings,
    )


# ============================================================================
# Drawing helpers
# ============================================================================

def parse_color(color: Any) -> RgbaColor:
    """Parse '#rgb', '#rrggbb', '#rrggbbaa', color names or RGBA tuples."""
    if isinstance(color, (tuple, list)):
        values = [int(v) for v in color]
        if len(values) == 3:
            values.append(255)
        if len(values) != 4:
            raise ValueError(f"Color tuple must have 3 or 4 values, got {color}")
        r, g, b, a = values
        return r, g, b, a
    r, g, b, a = ImageColor.getcolor(str(color), "RGBA")
    return r, g, b, a


def _load_font(font_size: int, bold: bool, italic: bool) -> Any:
    font_file = TEXT_FONT_FILES[(bool(bold), bool(italic))]
    try:
        return ImageFont.truetype(font_file, int(font_size))
    except OSError:
        logger.warning(f"Font '{font_file}' not found, using Pillow's default font")
        return ImageFont.load_default(size=int(font_size))


def _new_layer(size: Tuple[int, int]) -> Any:
    return Image.new("RGBA", size, (0, 0, 0, 0))


def _box(x: float, y: float, width: float, height: float, grow: float = 0.0) -> List[float]:
    left, right = sorted((x, x + width))
    top, bottom = sorted((y, y + height))
    return [left - grow, top - grow, right + grow, bottom + grow]


def _stroke_segments(draw: Any, segments: Iterable[Tuple[Point, Point]], color: RgbaColor, width: int) -> None:
    """Draw line segments with round caps."""
    radius = width / 2
    for start, end in segments:
        draw.line([start, end], fill=color, width=width)
        if radius >= 1:
            for px, py in (start, end):
                draw.ellipse([px - radius, py - radius, px + radius, py + radius], fill=color)


def arrow_segments(overlay: ShapeOverlay) -> List[Tuple[Point, Point]]:
    """
    Shaft and head segments for an arrow overlay, in drawing order.

    The shaft runs left-to-right through the vertical center of the box; the
    two head strokes follow it.
    """
    start_x = overlay.x
    start_y = overlay.y + overlay.height / 2
    end_x = overlay.x + overlay.width
    end_y = overlay.y + overlay.height / 2
    angle = math.atan2(end_y - start_y, end_x - start_x)

    end = (end_x, end_y)
    head_left = (
        end_x - ARROW_HEAD_LENGTH * math.cos(angle - ARROW_HEAD_ANGLE),
        end_y - ARROW_HEAD_LENGTH * math.sin(angle - ARROW_HEAD_ANGLE),
    )
    head_right = (
        end_x - ARROW_HEAD_LENGTH * math.cos(angle + ARROW_HEAD_ANGLE),
        end_y - ARROW_HEAD_LENGTH * math.sin(angle + ARROW_HEAD_ANGLE),
    )
    return [((start_x, start_y), end), (end, head_left), (end, head_right)]


def _draw_shape(canvas: Any, overlay: ShapeOverlay) -> Any:
    layer = _new_layer(canvas.size)
    draw = ImageDraw.Draw(layer)
    stroke_color = parse_color(overlay.stroke_color)
    stroke_width = int(overlay.stroke_width)
    half = stroke_width / 2

    if overlay.kind in ("rectangle", "circle"):
        shape = draw.rectangle if overlay.kind == "rectangle" else draw.ellipse
        if overlay.fill:
            shape(_box(overlay.x, overlay.y, overlay.width, overlay.height),
                  fill=parse_color(overlay.fill_color))
            # Fill and stroke share one layer; composite the fill first so a
            # translucent stroke blends over it instead of replacing it.
            canvas = Image.alpha_composite(canvas, layer)
            layer = _new_layer(canvas.size)
            draw = ImageDraw.Draw(layer)
        if stroke_width > 0:
            # Stroke is centered on the path, half inside and half outside
            box = _box(overlay.x, overlay.y, overlay.width, overlay.height, grow=half)
            if overlay.kind == "rectangle":
                # Round joins: outer corners follow a radius of half the stroke
                draw.rounded_rectangle(box, radius=stroke_width // 2,
                                       outline=stroke_color, width=stroke_width)
            else:
                draw.ellipse(box, outline=stroke_color, width=stroke_width)
    elif overlay.kind == "arrow":
        _stroke_segments(draw, arrow_segments(overlay), stroke_color, stroke_width)
    else:
        segment = ((overlay.x, overlay.y), (overlay.x + overlay.width, overlay.y + overlay.height))
        _stroke_segments(draw, [segment], stroke_color, stroke_width)

    return Image.alpha_composite(canvas, layer)


def _draw_text(canvas: Any, overlay: TextOverlay) -> Any:
    font = _load_font(overlay.font_size, overlay.bold, overlay.italic)
    color = parse_color(overlay.color)
    position = (overlay.x, overlay.y)

    if overlay.outline:
        outline_layer = _new_layer(canvas.size)
        ImageDraw.Draw(outline_layer).text(
            position,
            overlay.text,
            font=font,
            fill=(0, 0, 0, 0),
            anchor="mm",
            stroke_width=TEXT_OUTLINE_WIDTH // 2,
            stroke_fill=color,
        )
        canvas = Image.alpha_composite(canvas, outline_layer)

    shadow_layer = _new_layer(canvas.size)
    offset_x, offset_y = TEXT_SHADOW_OFFSET
    ImageDraw.Draw(shadow_layer).text(
        (overlay.x + offset_x, overlay.y + offset_y),
        overlay.text,
        font=font,
        fill=TEXT_SHADOW_COLOR,
        anchor="mm",
    )
    # A shadow blur of N approximates a Gaussian with sigma N / 2
    shadow_layer = shadow_layer.filter(ImageFilter.GaussianBlur(radius=TEXT_SHADOW_BLUR / 2))
    canvas = Image.alpha_composite(canvas, shadow_layer)

    text_layer = _new_layer(canvas.size)
    ImageDraw.Draw(text_layer).text(position, overlay.text, font=font, fill=color, anchor="mm")
    return Image.alpha_composite(canvas, text_layer)


# ============================================================================
# Compositor
# ============================================================================

def draw_overlays(buffer: PixelBuffer, overlays: Iterable[Overlay]) -> PixelBuffer:
    """
    Paint overlays onto the buffer in list order.

    Args:
        buffer: Rendered PixelBuffer (modified in place)
        overlays: TextOverlay / ShapeOverlay records in paint order

    Returns:
        The same PixelBuffer with overlays painted on

    Raises:
        TypeError: If buffer is not a PixelBuffer or an overlay is unknown
    """
    require_buffer(buffer)
    overlays = list(overlays)
    if not overlays:
        return buffer

    canvas = buffer.to_image()
    for overlay in overlays:
        if isinstance(overlay, TextOverlay):
            canvas = _draw_text(canvas, overlay)
        elif isinstance(overlay, ShapeOverlay):
            canvas = _draw_shape(canvas, overlay)
        else:
            raise TypeError(f"Expected TextOverlay or ShapeOverlay, got {type(overlay)}")

    buffer.data[:] = np.asarray(canvas, dtype=np.uint8)
    logger.debug(f"Drew {len(overlays)} overlay(s) on {buffer.width}x{buffer.height} buffer")
    return buffer
