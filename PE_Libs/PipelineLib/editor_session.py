"""
Editing session context object.

An EditorSession holds everything one editing session mutates: the loaded
original image, the current pre-adjustment working image, the declarative
edit state (adjustments, filter, overlays), the undo/redo history and the
background remover. One session is constructed per editor window and passed
to whatever drives it; there is no process-wide editor state.

Committed actions (load, rotate/flip/crop, overlay add/remove, background
removal, reset) push a history snapshot. Live slider changes and filter
selection only change the edit state; call ``commit()`` to snapshot them.

A session has a single writer. Hosts that drive it from several threads must
serialize calls themselves.

Example:
    >>> session = EditorSession()
    >>> session.load_image(PixelBuffer.from_image(Image.open("photo.jpg")))
    >>> session.set_adjustment("contrast", 25)
    >>> session.rotate(90)
    >>> png_bytes = session.export()
"""

import logging
from pathlib import Path
from typing import List, Optional

from PE_Libs.constants import AUTO_ENHANCE_ADJUSTMENTS, DEFAULT_HISTORY_SIZE
from PE_Libs.ImageEditingLib.color_filter import apply_preset_to_adjustments
from PE_Libs.ImageEditingLib.export_ops import ExportConfig, encode_image, save_image
from PE_Libs.ImageEditingLib.geometry_ops import crop_buffer, flip_buffer, rotate_buffer
from PE_Libs.ImageEditingLib.image_models import (
    AdjustmentParams,
    EditState,
    Overlay,
    ShapeOverlay,
    TextOverlay,
    validate_filter_name,
)
from PE_Libs.ImageEditingLib.overlay_compositor import create_shape_overlay, create_text_overlay
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer, require_buffer
from PE_Libs.HistoryLib.edit_history import EditHistory, HistoryEntry
from PE_Libs.PipelineLib.background_removal import BackgroundRemover
from PE_Libs.PipelineLib.render_pipeline import render

logger = logging.getLogger(__name__)


class EditorSession:
    """Orchestrates edits, rendering and history for one image at a time."""

    def __init__(
        self,
        history_size: int = DEFAULT_HISTORY_SIZE,
        background_remover: Optional[BackgroundRemover] = None,
    ):
        self.history = EditHistory(max_size=history_size)
        self.background_remover = background_remover
        self.original: Optional[PixelBuffer] = None
        self.working: Optional[PixelBuffer] = None
        self.adjustments = AdjustmentParams()
        self.filter_name = "none"
        self.overlays: List[Overlay] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def has_image(self) -> bool:
        return self.working is not None

    @property
    def edit_state(self) -> EditState:
        """Immutable snapshot of the current adjustments, filter and overlays."""
        return EditState(
            adjustments=self.adjustments,
            filter_name=self.filter_name,
            overlays=tuple(self.overlays),
        )

    def _require_image(self) -> PixelBuffer:
        if self.working is None:
            raise ValueError("No image loaded")
        return self.working

    def commit(self) -> None:
        """Push the current working image and edit state onto history."""
        working = self._require_image()
        self.history.push(HistoryEntry.capture(working, self.edit_state))

    # ------------------------------------------------------------------
    # Loading and reset
    # ------------------------------------------------------------------

    def load_image(self, buffer: PixelBuffer) -> None:
        """
        Start editing a new source image.

        Clears overlays, adjustments, filter and history, then records the
        loaded image as the first history entry.
        """
        require_buffer(buffer)
        self.original = buffer.copy()
        self.working = buffer.copy()
        self.overlays = []
        self.reset_adjustments()
        self.history.clear()
        self.commit()
        logger.info(f"Loaded {buffer.width}x{buffer.height} image")

    def reset_adjustments(self) -> None:
        """Zero every slider and select the 'none' filter."""
        self.adjustments = AdjustmentParams()
        self.filter_name = "none"

    def reset_image(self) -> None:
        """Return to the originally loaded image with no edits (undoable)."""
        if self.original is None:
            raise ValueError("No image loaded")
        self.working = self.original.copy()
        self.overlays = []
        self.reset_adjustments()
        self.commit()

    # ------------------------------------------------------------------
    # Adjustments and filters
    # ------------------------------------------------------------------

    def set_adjustment(self, name: str, value: float) -> AdjustmentParams:
        """Change one slider value."""
        self.adjustments = self.adjustments.updated(**{name: value})
        return self.adjustments

    def set_adjustments(self, params: AdjustmentParams) -> None:
        if not isinstance(params, AdjustmentParams):
            raise TypeError(f"Expected AdjustmentParams, got {type(params)}")
        self.adjustments = params

    def set_filter(self, filter_name: str) -> None:
        """Select the color filter applied as the final raster stage."""
        self.filter_name = validate_filter_name(filter_name)

    def apply_filter_preset(self, filter_name: str) -> AdjustmentParams:
        """
        Load a filter's adjustment preset into the sliders.

        Only the preset's named fields change. The selected render filter is
        left as it is.
        """
        validate_filter_name(filter_name)
        self.adjustments = apply_preset_to_adjustments(filter_name, self.adjustments)
        return self.adjustments

    def auto_enhance(self) -> AdjustmentParams:
        """Replace the sliders with the one-click enhancement values."""
        self._require_image()
        self.adjustments = AdjustmentParams.from_dict(AUTO_ENHANCE_ADJUSTMENTS)
        return self.adjustments

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def rotate(self, degrees: float) -> None:
        self.working = rotate_buffer(self._require_image(), degrees)
        self.commit()

    def flip(self, axis: str) -> None:
        self.working = flip_buffer(self._require_image(), axis)
        self.commit()

    def crop(self, x: float, y: float, width: float, height: float) -> None:
        """Crop the working image; the rectangle must lie inside it."""
        self.working = crop_buffer(self._require_image(), x, y, width, height)
        self.commit()

    # ------------------------------------------------------------------
    # Overlays
    # ------------------------------------------------------------------

    def add_text_overlay(self, text: str, **text_settings) -> TextOverlay:
        working = self._require_image()
        overlay = create_text_overlay(working.width, working.height, text, **text_settings)
        self.overlays.append(overlay)
        self.commit()
        return overlay

    def add_shape_overlay(self, **shape_settings) -> ShapeOverlay:
        working = self._require_image()
        overlay = create_shape_overlay(working.width, working.height, **shape_settings)
        self.overlays.append(overlay)
        self.commit()
        return overlay

    def add_overlay(self, overlay: Overlay) -> None:
        """Append a ready-made overlay on top of the existing ones."""
        self._require_image()
        if not isinstance(overlay, (TextOverlay, ShapeOverlay)):
            raise TypeError(f"Expected TextOverlay or ShapeOverlay, got {type(overlay)}")
        self.overlays.append(overlay)
        self.commit()

    def remove_overlay(self, index: int) -> Overlay:
        """
        Delete the overlay at index.

        Raises:
            IndexError: If index is out of range
        """
        self._require_image()
        if not (0 <= index < len(self.overlays)):
            raise IndexError(f"Overlay index {index} out of range (0-{len(self.overlays) - 1})")
        overlay = self.overlays.pop(index)
        self.commit()
        return overlay

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        """Step back one entry. Returns False when there is nothing to undo."""
        entry = self.history.undo()
        if entry is None:
            return False
        self._restore(entry)
        return True

    def redo(self) -> bool:
        """Step forward one entry. Returns False when there is nothing to redo."""
        entry = self.history.redo()
        if entry is None:
            return False
        self._restore(entry)
        return True

    def _restore(self, entry: HistoryEntry) -> None:
        state = entry.edit_state
        self.working = entry.restore_image()
        self.adjustments = state.adjustments
        self.filter_name = state.filter_name
        self.overlays = list(state.overlays)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render(self) -> PixelBuffer:
        """Render the working image through the current edit state."""
        return render(self._require_image(), self.edit_state)

    def export(self, config: Optional[ExportConfig] = None) -> bytes:
        """Render and encode the result (PNG by default)."""
        return encode_image(self.render(), config)

    def export_to_file(
        self,
        output_path: Path,
        config: Optional[ExportConfig] = None,
        overwrite: bool = False,
    ) -> Path:
        return save_image(self.render(), output_path, config, overwrite=overwrite)

    # ------------------------------------------------------------------
    # Background removal
    # ------------------------------------------------------------------

    async def remove_background(self) -> None:
        """
        Replace the working image with a background-removed version.

        On success the result becomes the working image and a history entry
        is pushed. On any failure the session is left exactly as it was and
        the error propagates to the caller.

        Raises:
            ValueError: If no image is loaded or no remover is configured
            BackgroundRemovalBusyError: If a removal is already in flight
            BackgroundRemovalError: If the service fails
        """
        working = self._require_image()
        if self.background_remover is None:
            raise ValueError("No background remover configured for this session")

        result = await self.background_remover.remove(working)
        self.working = result
        self.commit()
