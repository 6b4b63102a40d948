"""
Render pipeline demonstration.

Builds a synthetic photo, runs a typical editing session over it (sliders,
a filter, geometry, overlays, undo/redo) and exports the result. Render
timings are printed for a few image sizes.

Run from the repository root:
    python examples/render_demo.py [output.png]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
import time

import numpy as np

from PE_Libs.ImageEditingLib.export_ops import ExportConfig, default_export_filename
from PE_Libs.ImageEditingLib.image_models import AdjustmentParams, EditState
from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer
from PE_Libs.PipelineLib.editor_session import EditorSession
from PE_Libs.PipelineLib.render_pipeline import get_render_summary, render


def make_photo(width, height):
    """Create a smooth color gradient standing in for a photo."""
    ys, xs = np.mgrid[0:height, 0:width]
    data = np.empty((height, width, 4), dtype=np.uint8)
    data[:, :, 0] = (xs * 255 // max(1, width - 1)).astype(np.uint8)
    data[:, :, 1] = (ys * 255 // max(1, height - 1)).astype(np.uint8)
    data[:, :, 2] = 128
    data[:, :, 3] = 255
    return PixelBuffer(data)


def benchmark_render(size, iterations=3):
    """Time full renders of a size x size image."""
    source = make_photo(size, size)
    state = EditState(
        adjustments=AdjustmentParams(exposure=10, contrast=20, saturation=15, sharpness=40),
        filter_name="vintage",
    )

    times = []
    for _ in range(iterations):
        start = time.time()
        render(source, state)
        times.append(time.time() - start)
    return sum(times) / len(times)


def run_session(output_path):
    """Drive an EditorSession through a typical edit and export it."""
    session = EditorSession()
    session.load_image(make_photo(800, 600))

    session.apply_filter_preset("warm")
    session.set_adjustment("sharpness", 30)
    session.set_filter("vibrant")
    session.commit()

    session.rotate(90)
    session.flip("horizontal")
    session.crop(50, 50, 500, 700)
    session.add_text_overlay("Photo Editor", font_size=40, outline=True)
    session.add_shape_overlay(kind="arrow", stroke_color="#ffd400")

    session.undo()
    session.redo()

    print(get_render_summary(session.edit_state))
    print(f"History: {session.history.info()}")

    saved = session.export_to_file(output_path, ExportConfig("PNG"), overwrite=True)
    print(f"Saved {session.working.width}x{session.working.height} render to {saved}")


def main():
    """Run the session demo and render benchmarks."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Render Pipeline Demonstration")
    print("=" * 60)

    output_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(default_export_filename())
    run_session(output_path)

    print("\nSize        Avg render")
    print("-" * 60)
    for size in (256, 512, 1024):
        average = benchmark_render(size)
        print(f"{size:4d}x{size:<4d}   {average:6.3f}s")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
