"""
Image editing data models for the photo editor core.

This module defines the declarative edit records passed from the UI into the
render pipeline and stored in edit history. Every record is a frozen
dataclass, so snapshots can be shared without aliasing live editor state.

Classes:
    AdjustmentParams: The eight tonal/sharpness slider values
    TextOverlay: A text annotation drawn over the rendered image
    ShapeOverlay: A rectangle, circle, arrow or line annotation
    EditState: Adjustments + filter + ordered overlays (the unit of history)

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    FilterName: One of the named whole-image color filters
    ShapeKind: One of the supported shape overlay kinds
    Overlay: Either a TextOverlay or a ShapeOverlay
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Literal, Tuple, Union

from PE_Libs.constants import (
    CONTRAST_SINGULARITY,
    OVERLAY_TYPE_SHAPE,
    OVERLAY_TYPE_TEXT,
)

RgbaColor = Tuple[int, int, int, int]
FilterName = Literal[
    "none", "vintage", "bw", "sepia", "vibrant", "warm", "cool", "dramatic", "fade", "noir"
]
ShapeKind = Literal["rectangle", "circle", "arrow", "line"]
FlipAxis = Literal["horizontal", "vertical"]

FILTER_NAMES: Tuple[str, ...] = (
    "none", "vintage", "bw", "sepia", "vibrant", "warm", "cool", "dramatic", "fade", "noir",
)
SHAPE_KINDS: Tuple[str, ...] = ("rectangle", "circle", "arrow", "line")
FLIP_AXES: Tuple[str, ...] = ("horizontal", "vertical")


def validate_filter_name(name: str) -> str:
    if name not in FILTER_NAMES:
        raise ValueError(
            f"Unsupported filter: {name}. Valid filters: {', '.join(FILTER_NAMES)}"
        )
    return name


@dataclass(frozen=True)
class AdjustmentParams:
    """Slider values for the adjustment chain.

    Attributes:
        exposure: -100..100, scales R,G,B by 1 + exposure/100
        brightness: -100..100, offsets R,G,B by brightness * 2.55
        contrast: strictly inside (-255, 255); the UI range is -100..100
        temperature: -100..100, warm (+) / cool (-) axis
        highlights: -100..100, lifts or pulls bright areas
        shadows: -100..100, lifts or pulls dark areas
        saturation: -100..100, blend toward/away from gray
        sharpness: 0..100, strength of the 3x3 sharpen kernel
    """
    exposure: float = 0
    brightness: float = 0
    contrast: float = 0
    temperature: float = 0
    highlights: float = 0
    shadows: float = 0
    saturation: float = 0
    sharpness: float = 0

    def __post_init__(self):
        """Reject contrast at or beyond the divide-by-zero boundary."""
        if not (-CONTRAST_SINGULARITY < self.contrast < CONTRAST_SINGULARITY):
            raise ValueError(
                f"contrast must be strictly between -{CONTRAST_SINGULARITY} and "
                f"{CONTRAST_SINGULARITY}, got {self.contrast}"
            )

    def updated(self, **changes: float) -> "AdjustmentParams":
        """Return a copy with the named fields replaced."""
        unknown = set(changes) - set(self.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown adjustment(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdjustmentParams":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass(frozen=True)
class TextOverlay:
    """Text annotation, positioned by its center in source-image pixels."""
    text: str
    x: float
    y: float
    font_size: int = 48
    color: str = "#ffffff"
    bold: bool = False
    italic: bool = False
    outline: bool = False

    overlay_type = OVERLAY_TYPE_TEXT

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.overlay_type
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextOverlay":
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass(frozen=True)
class ShapeOverlay:
    """Shape annotation defined by a bounding box in source-image pixels.

    Attributes:
        kind: 'rectangle', 'circle', 'arrow' or 'line'
        x, y: top-left of the bounding box (line start for 'line')
        width, height: box extent (line vector for 'line')
        stroke_width: stroke width in pixels
        stroke_color: CSS-style hex color ('#rrggbb' or '#rrggbbaa')
        fill: whether rectangle/circle interiors are filled
        fill_color: fill color, hex with optional alpha
    """
    kind: ShapeKind
    x: float
    y: float
    width: float
    height: float
    stroke_width: int = 8
    stroke_color: str = "#ff4444"
    fill: bool = False
    fill_color: str = "#ff444466"

    overlay_type = OVERLAY_TYPE_SHAPE

    def __post_init__(self):
        if self.kind not in SHAPE_KINDS:
            raise ValueError(
                f"Unknown shape kind: {self.kind}. Valid kinds: {', '.join(SHAPE_KINDS)}"
            )
        if self.stroke_width < 0:
            raise ValueError(f"stroke_width must be >= 0, got {self.stroke_width}")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.overlay_type
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShapeOverlay":
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


Overlay = Union[TextOverlay, ShapeOverlay]


def overlay_from_dict(data: Dict[str, Any]) -> Overlay:
    """Rebuild a text or shape overlay from its tagged dictionary form."""
    overlay_type = data.get("type")
    if overlay_type == OVERLAY_TYPE_TEXT:
        return TextOverlay.from_dict(data)
    if overlay_type == OVERLAY_TYPE_SHAPE:
        return ShapeOverlay.from_dict(data)
    raise ValueError(f"Unknown overlay type: {overlay_type}")


@dataclass(frozen=True)
class EditState:
    """Declarative description of every edit applied on top of a working image.

    Overlays are kept in paint order: later entries are drawn over earlier ones.
    """
    adjustments: AdjustmentParams = field(default_factory=AdjustmentParams)
    filter_name: str = "none"
    overlays: Tuple[Overlay, ...] = ()

    def __post_init__(self):
        validate_filter_name(self.filter_name)
        if not isinstance(self.overlays, tuple):
            object.__setattr__(self, "overlays", tuple(self.overlays))
        for overlay in self.overlays:
            if not isinstance(overlay, (TextOverlay, ShapeOverlay)):
                raise TypeError(f"Expected TextOverlay or ShapeOverlay, got {type(overlay)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain structured data."""
        return {
            "adjustments": self.adjustments.to_dict(),
            "filter": self.filter_name,
            "overlays": [overlay.to_dict() for overlay in self.overlays],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditState":
        """Create from dictionary."""
        return cls(
            adjustments=AdjustmentParams.from_dict(data.get("adjustments", {})),
            filter_name=data.get("filter", "none"),
            overlays=tuple(overlay_from_dict(o) for o in data.get("overlays", [])),
        )
