"""
Bounded undo/redo history of complete edit snapshots.

Classes:
    HistoryEntry: Immutable snapshot of the working image + EditState
    EditHistory: Cursor-based stack with branch discard and eviction

State machine:
    empty --push--> non-empty (cursor = last entry)
    push:  drop entries after the cursor, append, advance the cursor, then
           evict the oldest entry (and shift the cursor) past the bound
    undo:  cursor > 0          -> cursor - 1, return that entry; else None
    redo:  cursor < length - 1 -> cursor + 1, return that entry; else None
    clear: back to empty

Example:
    >>> history = EditHistory(max_size=20)
    >>> history.push(HistoryEntry.capture(buffer, EditState()))
    >>> history.can_undo()
    False
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from PE_Libs.constants import DEFAULT_HISTORY_SIZE
from PE_Libs.ImageEditingLib.image_models import EditState
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PE_Libs.HistoryLib.snapshot_codec import decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of one committed editor state.

    Attributes:
        image_data: PNG bytes of the pre-adjustment working image
        edit_state: Adjustments, filter and overlays at commit time
    """
    image_data: bytes
    edit_state: EditState

    @classmethod
    def capture(cls, working_image: PixelBuffer, edit_state: EditState) -> "HistoryEntry":
        """Encode the working image and pair it with the edit state."""
        return cls(image_data=encode_snapshot(working_image), edit_state=edit_state)

    def restore_image(self) -> PixelBuffer:
        """Decode a fresh copy of the snapshot image."""
        return decode_snapshot(self.image_data)

    def to_dict(self) -> Dict[str, Any]:
        """Plain structured form of the edit state (image bytes excluded)."""
        return self.edit_state.to_dict()


class EditHistory:
    """
    Undo/redo stack of HistoryEntry snapshots.

    Entries past the cursor are redo-able; pushing a new entry discards them.
    At most ``max_size`` entries are kept; the oldest is evicted first.
    """

    def __init__(self, max_size: int = DEFAULT_HISTORY_SIZE):
        """
        Initialize an empty history.

        Raises:
            ValueError: If max_size < 1
        """
        if int(max_size) < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.max_size = int(max_size)
        self._entries: List[HistoryEntry] = []
        self._cursor = -1

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: HistoryEntry) -> None:
        """Commit a new entry, discarding any redo branch."""
        if not isinstance(entry, HistoryEntry):
            raise TypeError(f"Expected HistoryEntry, got {type(entry)}")

        discarded = len(self._entries) - (self._cursor + 1)
        del self._entries[self._cursor + 1:]
        if discarded:
            logger.debug(f"Discarded {discarded} redo entr{'y' if discarded == 1 else 'ies'}")

        self._entries.append(entry)
        self._cursor += 1

        if len(self._entries) > self.max_size:
            self._entries.pop(0)
            self._cursor -= 1
            logger.debug("History bound reached, evicted oldest entry")

        logger.debug(f"History push: {len(self._entries)} entries, cursor {self._cursor}")

    def undo(self) -> Optional[HistoryEntry]:
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Optional[HistoryEntry]:
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def current(self) -> Optional[HistoryEntry]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def clear(self) -> None:
        """Reset to the empty state."""
        self._entries = []
        self._cursor = -1
        logger.debug("History cleared")

    def info(self) -> Dict[str, Any]:
        """Summary for debugging and UI button state."""
        return {
            "total": len(self._entries),
            "current": self._cursor,
            "can_undo": self.can_undo(),
            "can_redo": self.can_redo(),
        }
