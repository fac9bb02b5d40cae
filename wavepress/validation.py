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

import numpy as np

from wavepress.errors import InvalidQuality, RasterIOError
from wavepress.normalization import normalize_path
from wavepress.config.constants import QUALITY_MIN, QUALITY_MAX


def _handle_folder_errors(folder: str | Path, ftype: str = 'data') -> Path:
    """Handles folder-related errors"""
    folder = normalize_path(folder)
    if not folder.exists() and ftype == 'data':
        msg = f"Provided {ftype} folder: '{folder}' does not exist."
        logging.error(msg)
        raise FileNotFoundError(msg)
    elif not folder.exists():
        logging.warning(f"Provided {ftype} folder: '{folder}' does not exist. Creating folder...")
        folder.mkdir(parents=True, exist_ok=True)
    if not folder.is_dir():
        msg = f"Provided {ftype} folder: '{folder}' is not a directory."
        logging.error(msg)
        raise NotADirectoryError(msg)
    try:
        # Test access permissions by listing contents
        next(folder.iterdir(), None)
    except PermissionError:
        msg = f"Provided {ftype} folder: '{folder}' is not accessible."
        logging.error(msg)
        raise PermissionError(msg)

    return folder


def validate_input_folder(folder: str | Path, ftype: str = 'data') -> Path:
    """Validates a data folder path"""
    folder = _handle_folder_errors(folder, ftype)
    if not any(folder.iterdir()):
        logging.warning(f"The folder '{folder}' is empty. Nothing to process.")
    return folder


def validate_output_folder(folder: str | Path, ftype: str = 'result') -> Path:
    """Validates results folder path, creating it when missing"""
    return _handle_folder_errors(folder, ftype)


def validate_input_file(path: str | Path) -> Path:
    """
    Validates that a source file exists and is a regular file.

    Raises:
        RasterIOError: If the file does not exist or is not a file.
    """
    path = normalize_path(path)
    if not path.is_file():
        msg = f"Source file '{path}' does not exist or is not a file."
        logging.error(msg)
        raise RasterIOError(msg)
    return path


def validate_quality(quality: int) -> int:
    """
    Validates the quality parameter of the lossy codec.

    Quality is the divisor of 100 that yields the quantization step, so it has
    to be a strictly positive integer no greater than QUALITY_MAX.

    Args:
        quality (int): Requested quality.

    Returns:
        int: The validated quality.

    Raises:
        InvalidQuality: If quality is not an integer (bools are rejected too).
        InvalidQuality: If quality is outside [QUALITY_MIN, QUALITY_MAX].
    """
    if isinstance(quality, bool) or not isinstance(quality, (int, np.integer)):
        msg = f"Quality must be an integer, got {type(quality).__name__}: {quality!r}"
        logging.error(msg)
        raise InvalidQuality(msg)
    if not QUALITY_MIN <= quality <= QUALITY_MAX:
        msg = f"Quality must be between {QUALITY_MIN} and {QUALITY_MAX}, got {quality}"
        logging.error(msg)
        raise InvalidQuality(msg)
    return int(quality)


def validate_image(image: np.ndarray) -> None:
    """
    Validates a greyscale pixel matrix by checking its existence, dimensions,
    type, and pixel value range. Raises an error if any validation fails.

    Args:
        image (np.ndarray): The input image array to validate.

    Raises:
        ValueError: If the input image is None or not a numpy array.
        ValueError: If the input image is not two-dimensional or is empty.
        ValueError: If the input image type is not np.uint8.
    """
    if image is None or not isinstance(image, np.ndarray):
        raise ValueError("Image didn't found. Please check your input.")
    if image.ndim != 2:
        raise ValueError(f"Image must be a single-channel 2D array, got shape {image.shape}")
    if image.shape[0] == 0 or image.shape[1] == 0 or image.size == 0:
        raise ValueError("Image is empty")
    if image.dtype != np.uint8:
        raise ValueError("Image must be of type uint8")
