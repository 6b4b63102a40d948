"""
PipelineLib - Rendering and session orchestration

This module runs the render pipeline over a source image and edit state,
and provides the per-session editor context and the single-flight
background-removal wrapper.
"""

from PE_Libs.PipelineLib.render_pipeline import (
    build_render_stages,
    get_render_summary,
    render,
)
from PE_Libs.PipelineLib.background_removal import (
    BackgroundRemovalBusyError,
    BackgroundRemovalError,
    BackgroundRemover,
)
from PE_Libs.PipelineLib.editor_session import EditorSession

__all__ = [
    "build_render_stages",
    "get_render_summary",
    "render",
    "BackgroundRemovalBusyError",
    "BackgroundRemovalError",
    "BackgroundRemover",
    "EditorSession",
]
