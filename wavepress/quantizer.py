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
Scalar quantization of wavelet coefficients.

The quantization step is `100 / quality`, so quality 100 keeps the
coefficients at unit precision and lower qualities discard more of it.
Rounding is half-up (`floor(x + 0.5)`), matching artifacts produced by the
browser-era encoder.
"""

import numpy as np

from wavepress.validation import validate_quality


def quantization_step(quality: int) -> float:
    """Returns the divisor applied to coefficients for the given quality"""
    quality = validate_quality(quality)
    return 100 / quality


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Rounds to the nearest integer, ties towards positive infinity"""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def quantize(coefficients: np.ndarray, quality: int) -> np.ndarray:
    """
    Quantizes coefficients element-wise.

    Args:
        coefficients (np.ndarray): Real-valued transform coefficients.
        quality (int): Quality in [QUALITY_MIN, QUALITY_MAX].

    Returns:
        np.ndarray: int64 array of the same shape.

    Raises:
        InvalidQuality: If quality is invalid.
    """
    step = quantization_step(quality)
    return round_half_up(np.asarray(coefficients, dtype=np.float64) / step).astype(np.int64)


def dequantize(quantized: np.ndarray, quality: int) -> np.ndarray:
    """Maps quantized integers back to real-valued coefficients"""
    step = quantization_step(quality)
    return np.asarray(quantized, dtype=np.float64) * step
