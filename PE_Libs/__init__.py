"""
PE_Libs - Photo Editor Library Modules

This package contains the pixel-processing and compositing core of the
photo editor, organized into specialized sub-packages:

- ImageEditingLib: Pixel buffer, edit models and raster stages
- HistoryLib: Undo/redo history of edit snapshots
- PipelineLib: Render pipeline, editing session and background removal
"""

__version__ = "0.1.0"
