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

import logging
from pathlib import Path

from wavepress.config.aliases import QualitySweep


def normalize_quality_sweep(quality: QualitySweep) -> tuple[int, ...]:
    """
    Normalizes the given quality input.

    The function converts the provided `quality` into a uniform, sorted tuple of
    unique integers so a sweep can be iterated from the coarsest to the finest
    quantization step. Range checks are left to `validate_quality`.

    Args:
        quality: An integer, a tuple, a list, or a range of integers.

    Returns:
        A sorted tuple of distinct integers.

    Raises:
        ValueError: If quality is not provided (None) or is empty.
        ValueError: If quality is not an integer, tuple, list, or range.
        ValueError: If any element of the quality is not an integer.
    """
    if quality is None:
        raise ValueError("Quality must be provided")
    if isinstance(quality, int) and not isinstance(quality, bool):
        quality = (quality,)
    if isinstance(quality, (tuple, list, range)):
        quality = tuple(quality)
    else:
        raise ValueError("Quality must be an integer, tuple, list, or range")
    if not quality:
        raise ValueError("Quality sweep must not be empty")
    if all(isinstance(q, int) and not isinstance(q, bool) for q in quality):
        return tuple(sorted(set(quality)))
    else:
        raise ValueError("All qualities must be integers")


def normalize_path(path: str | Path) -> Path:
    """Normalizes a file or folder path"""
    if not isinstance(path, (Path, str)):
        msg = f"Invalid input type: {type(path)}. Expected str or Path."
        logging.error(msg)
        raise TypeError(msg)
    return Path(path)
