"""
Constants and configuration values for the photo editor core.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the pixel pipeline, overlay
compositor, edit history and export code.
"""

import math

# History constants
DEFAULT_HISTORY_SIZE = 20
SNAPSHOT_FORMAT = "PNG"

# Sharpness slider range
SHARPNESS_MIN = 0
SHARPNESS_MAX = 100
# |contrast| must stay strictly below this value
CONTRAST_SINGULARITY = 255

# Adjustment math coefficients
BRIGHTNESS_SCALE = 2.55
TEMPERATURE_SCALE = 0.5
TONE_SCALE = 0.5
MIDPOINT = 128.0
SATURATION_WEIGHTS = (0.2989, 0.587, 0.114)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Overlay constants
ARROW_HEAD_LENGTH = 20
ARROW_HEAD_ANGLE = math.pi / 6
STROKE_REFERENCE_SIZE = 1000
TEXT_OUTLINE_WIDTH = 2
TEXT_SHADOW_COLOR = (0, 0, 0, 128)
TEXT_SHADOW_BLUR = 4
TEXT_SHADOW_OFFSET = (2, 2)
TEXT_FONT_FILES = {
    (False, False): "DejaVuSans.ttf",
    (True, False): "DejaVuSans-Bold.ttf",
    (False, True): "DejaVuSans-Oblique.ttf",
    (True, True): "DejaVuSans-BoldOblique.ttf",
}

OVERLAY_TYPE_TEXT = "text"
OVERLAY_TYPE_SHAPE = "shape"

DEFAULT_TEXT_SETTINGS = {
    "font_size": 48,
    "color": "#ffffff",
    "bold": False,
    "italic": False,
    "outline": False,
}

DEFAULT_SHAPE_SETTINGS = {
    "kind": "rectangle",
    "stroke_width": 8,
    "stroke_color": "#ff4444",
    "fill": False,
    "fill_color": "#ff444466",
}

# One-click enhancement values
AUTO_ENHANCE_ADJUSTMENTS = {
    "brightness": 5,
    "contrast": 10,
    "saturation": 15,
    "exposure": 5,
    "highlights": -10,
    "shadows": 10,
    "temperature": 0,
    "sharpness": 20,
}

# Export constants
SUPPORTED_EXPORT_FORMATS = ("PNG", "JPEG", "WEBP")
LOSSY_EXPORT_FORMATS = ("JPEG", "WEBP")
EXPORT_EXTENSIONS = {"PNG": "png", "JPEG": "jpg", "WEBP": "webp"}
DEFAULT_EXPORT_FORMAT = "PNG"
DEFAULT_EXPORT_QUALITY = 90
DEFAULT_EXPORT_STEM = "photeditor-export"

# Background removal
BACKGROUND_REMOVAL_QUALITIES = ("small", "medium", "large")
DEFAULT_BACKGROUND_REMOVAL_QUALITY = "medium"
