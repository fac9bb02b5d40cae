# WAVEPRESS: Wavelet and Predictive Image Compression
# Copyright (C) 2025  The WAVEPRESS contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Reconstruction quality measures for comparing an original greyscale image
with its decompressed copy.
"""

from pathlib import Path

import numpy as np

from wavepress.errors import DimensionMismatch
from wavepress.normalization import normalize_path
from wavepress.config.constants import PIXEL_MAX


def _difference(original: np.ndarray, reconstructed: np.ndarray) -> np.ndarray:
    if original.shape != reconstructed.shape:
        raise DimensionMismatch(f"Cannot compare images of shapes {original.shape} and {reconstructed.shape}")
    return original.astype(np.float64) - reconstructed.astype(np.float64)


def mean_absolute_error(original: np.ndarray, reconstructed: np.ndarray) -> float:
    """MAE between two images (0 = identical)"""
    return float(np.mean(np.abs(_difference(original, reconstructed))))


def mean_squared_error(original: np.ndarray, reconstructed: np.ndarray) -> float:
    """MSE between two images (0 = identical)"""
    return float(np.mean(_difference(original, reconstructed) ** 2))


def psnr(original: np.ndarray, reconstructed: np.ndarray) -> float:
    """
    Peak Signal-to-Noise Ratio in dB.

    Returns:
        float: Higher is better, inf for identical images.
    """
    mse = mean_squared_error(original, reconstructed)
    if mse == 0:
        return float('inf')
    return float(10 * np.log10(PIXEL_MAX ** 2 / mse))


def compression_ratio(source_path: str | Path, artifact_path: str | Path) -> float:
    """Source size divided by artifact size; below 1 the artifact is larger"""
    source_size = normalize_path(source_path).stat().st_size
    artifact_size = normalize_path(artifact_path).stat().st_size
    return source_size / artifact_size
