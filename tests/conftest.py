"""
Pytest configuration and shared fixtures for photo editor core tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest

from PE_Libs.ImageEditingLib.pixel_buffer import PixelBuffer


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for exported files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def gray_buffer():
    """Provide a 2x2 opaque mid-gray buffer."""
    return PixelBuffer.new(2, 2, (128, 128, 128, 255))


@pytest.fixture
def gradient_buffer():
    """
    Provide an 8x6 buffer whose channels vary per pixel.

    R follows x, G follows y, B mixes both and alpha is partially
    transparent, so every pixel is distinguishable.
    """
    height, width = 6, 8
    ys, xs = np.mgrid[0:height, 0:width]
    data = np.empty((height, width, 4), dtype=np.uint8)
    data[:, :, 0] = xs * 30
    data[:, :, 1] = ys * 40
    data[:, :, 2] = (xs * 7 + ys * 11) % 256
    data[:, :, 3] = 200
    return PixelBuffer(data)
