"""
HistoryLib - Undo/redo history

This module keeps committed editor states as immutable snapshots with a
lossless image encoding, for undo/redo navigation.
"""

from PE_Libs.HistoryLib.edit_history import EditHistory, HistoryEntry
from PE_Libs.HistoryLib.snapshot_codec import decode_snapshot, encode_snapshot

__all__ = [
    "EditHistory",
    "HistoryEntry",
    "decode_snapshot",
    "encode_snapshot",
]
