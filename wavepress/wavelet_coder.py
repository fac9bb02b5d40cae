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

from abc import ABC, abstractmethod

import numpy as np

from wavepress.errors import DimensionMismatch


class WaveletCoder(ABC):
    """
    Abstract base class for single-level separable 2D wavelet transforms.
    """

    @abstractmethod
    def forward(self, matrix: np.ndarray) -> np.ndarray:
        """
        Decompose the matrix into approximation and detail quadrants.
        """

    @abstractmethod
    def inverse(self, matrix: np.ndarray) -> np.ndarray:
        """
        Rebuild the matrix from its approximation and detail quadrants.
        """


class HaarCoder(WaveletCoder):
    """
    The simplified image compressor based on the Haar wavelet.

    One decomposition level only. After `forward` the matrix holds the
    approximation in the top-left quadrant and the horizontal, vertical and
    diagonal details in the remaining three. Both methods are pure: the input
    is left untouched and a new float64 array is returned.
    """

    def __init__(self):
        super().__init__()
        self._ONE_STEP_RATIO = 2

    def _checked_copy(self, matrix: np.ndarray) -> np.ndarray:
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.size == 0:
            raise DimensionMismatch(f"Expected a non-empty 2D matrix, got shape {matrix.shape}")
        rows, cols = matrix.shape
        if rows % self._ONE_STEP_RATIO or cols % self._ONE_STEP_RATIO:
            raise DimensionMismatch(f"Matrix dimensions must be even, got {rows}x{cols}")
        return matrix

    def forward(self, matrix: np.ndarray) -> np.ndarray:
        transformed = self._checked_copy(matrix)

        # Rows first: the column pass reads already transformed rows
        evens, odds = transformed[:, ::2], transformed[:, 1::2]
        transformed = np.hstack(((evens + odds) / 2, (evens - odds) / 2))

        evens, odds = transformed[::2, :], transformed[1::2, :]
        return np.vstack(((evens + odds) / 2, (evens - odds) / 2))

    def inverse(self, matrix: np.ndarray) -> np.ndarray:
        coefficients = self._checked_copy(matrix)
        rows, cols = coefficients.shape
        half_rows, half_cols = rows // 2, cols // 2

        # Columns first, mirroring the forward order
        approx, detail = coefficients[:half_rows, :], coefficients[half_rows:, :]
        vertical = np.empty_like(coefficients)
        vertical[::2, :] = approx + detail
        vertical[1::2, :] = approx - detail

        approx, detail = vertical[:, :half_cols], vertical[:, half_cols:]
        reconstructed = np.empty_like(coefficients)
        reconstructed[:, ::2] = approx + detail
        reconstructed[:, 1::2] = approx - detail

        return reconstructed
