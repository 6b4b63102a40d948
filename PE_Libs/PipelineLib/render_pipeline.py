"""
Render pipeline.

Turns a source image plus an EditState into the display/export bitmap.
Every render starts from a fresh copy of the unmodified source, so results
never depend on earlier renders.

Stage order:
    clone source -> adjustments -> sharpen (sharpness > 0)
    -> color filter (filter != 'none') -> overlays

Functions:
    build_render_stages: The ordered stages that will run for an EditState
    render: Execute the stages and return the output buffer
    get_render_summary: Human-readable description of the stages
"""

import logging
from typing import Callable, List, Tuple

from PE_Libs.ImageEditingLib.adjustment_engine import apply_adjustments
from PE_Libs.ImageEditingLib.color_filter import apply_filter
from PE_Libs.ImageEditingLib.image_models import EditState
from PE_Libs.ImageEditingLib.overlay_compositor import draw_overlays
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer
from PE_Libs.ImageEditingLib.sharpen_filter import apply_sharpen, sharpness_to_amount

logger = logging.getLogger(__name__)

# Type alias for a render stage: buffer in, buffer out
StageFunction = Callable[[PixelBuffer], PixelBuffer]


def build_render_stages(edit_state: EditState) -> List[Tuple[str, StageFunction]]:
    """
    Build the ordered list of stages for an edit state.

    Stages whose parameters make them no-ops are left out.

    Returns:
        List of (stage_name, stage_function) in execution order
    """
    if not isinstance(edit_state, EditState):
        raise TypeError(f"Expected EditState, got {type(edit_state)}")

    params = edit_state.adjustments
    stages: List[Tuple[str, StageFunction]] = [
        ("adjustments", lambda buffer: apply_adjustments(buffer, params)),
    ]

    if params.sharpness > 0:
        amount = sharpness_to_amount(params.sharpness)
        stages.append(("sharpen", lambda buffer: apply_sharpen(buffer, amount)))

    if edit_state.filter_name != "none":
        filter_name = edit_state.filter_name
        stages.append(("filter", lambda buffer: apply_filter(buffer, filter_name)))

    if edit_state.overlays:
        overlays = edit_state.overlays
        stages.append(("overlays", lambda buffer: draw_overlays(buffer, overlays)))

    return stages


def render(source: PixelBuffer, edit_state: EditState) -> PixelBuffer:
    """
    Render a source image through the edit state.

    Args:
        source: Pre-adjustment working image (never modified)
        edit_state: Adjustments, filter and overlays to apply

    Returns:
        New PixelBuffer holding the composited result

    Raises:
        TypeError: If source is not a PixelBuffer or edit_state not an EditState
    """
    require_buffer(source)
    stages = build_render_stages(edit_state)

    buffer = source.copy()
    for stage_name, stage in stages:
        buffer = stage(buffer)
        logger.debug(f"Render stage '{stage_name}' done ({buffer.width}x{buffer.height})")

    return buffer


def get_render_summary(edit_state: EditState) -> str:
    """Describe which stages a render of this state will run."""
    stages = build_render_stages(edit_state)
    lines = [f"Render pipeline ({len(stages)} stages):"]
    for index, (stage_name, _) in enumerate(stages, start=1):
        lines.append(f"  {index}. {stage_name}")
    return "\n".join(lines)
