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

import cv2
import numpy as np

from wavepress.errors import RasterIOError
from wavepress.normalization import normalize_path
from wavepress.validation import validate_input_file
from wavepress.config.constants import PAD_RATIO, PIXEL_MIN, PIXEL_MAX


def decode_greyscale(file_path: str | Path) -> tuple[np.ndarray, int, int]:
    """
    Decodes an image file into a single-channel 8-bit pixel matrix.

    Colour images are converted to greyscale by OpenCV while decoding.

    Args:
        file_path (str | Path): Path to the image file to be loaded.

    Returns:
        tuple[np.ndarray, int, int]: The uint8 pixel matrix of shape
        (height, width), its width and its height.

    Raises:
        RasterIOError: If the file does not exist or OpenCV cannot decode it.
    """
    file_path = validate_input_file(file_path)

    image = cv2.imread(str(file_path), cv2.IMREAD_GRAYSCALE)
    if image is None:
        msg = f"Failed to decode image: {file_path}"
        logging.error(msg)
        raise RasterIOError(msg)

    height, width = image.shape[:2]
    return image, width, height


def encode_from_buffer(pixels: np.ndarray | bytes | bytearray,
                       width: int,
                       height: int,
                       file_path: str | Path
                       ) -> Path:
    """
    Encodes a greyscale pixel buffer into a standard image file.

    The container format is chosen by OpenCV from the file extension.

    Args:
        pixels: Either a (height, width) array or a flat buffer of width * height bytes.
        width (int): Image width.
        height (int): Image height.
        file_path (str | Path): Destination path.

    Returns:
        Path: The written destination path.

    Raises:
        RasterIOError: If the buffer does not hold width * height samples, holds
            values outside [0, 255] or non-integers, or the image cannot be written.
    """
    file_path = normalize_path(file_path)
    image = np.asarray(pixels if not isinstance(pixels, (bytes, bytearray))
                       else np.frombuffer(pixels, dtype=np.uint8))

    if image.size != width * height:
        msg = f"Pixel buffer holds {image.size} samples, expected {width}x{height}"
        logging.error(msg)
        raise RasterIOError(msg)
    if image.dtype != np.uint8:
        if image.dtype.kind not in 'iu' or image.min() < PIXEL_MIN or image.max() > PIXEL_MAX:
            msg = f"Pixel buffer must hold integers in [{PIXEL_MIN}, {PIXEL_MAX}], got dtype {image.dtype}"
            logging.error(msg)
            raise RasterIOError(msg)
        image = image.astype(np.uint8)
    image = image.reshape(height, width)

    try:
        written = cv2.imwrite(str(file_path), image)
    except cv2.error as e:
        msg = f"Failed to encode image {file_path}: {e}"
        logging.error(msg)
        raise RasterIOError(msg) from e
    if not written:
        msg = f"Failed to write image: {file_path}"
        logging.error(msg)
        raise RasterIOError(msg)

    return file_path


def read_raw_bytes(file_path: str | Path) -> bytes:
    """Reads a file as a flat byte sequence"""
    file_path = validate_input_file(file_path)
    try:
        return file_path.read_bytes()
    except OSError as e:
        msg = f"Failed to read {file_path}: {e}"
        logging.error(msg)
        raise RasterIOError(msg) from e


def write_raw_bytes(data: bytes, file_path: str | Path) -> Path:
    """Writes a flat byte sequence without any header"""
    file_path = normalize_path(file_path)
    try:
        file_path.write_bytes(data)
    except OSError as e:
        msg = f"Failed to write {file_path}: {e}"
        logging.error(msg)
        raise RasterIOError(msg) from e
    return file_path


def get_padded_copy(image: np.ndarray, ratio: int = PAD_RATIO, border_type: int = cv2.BORDER_CONSTANT,
                    border_constant: int = 0) -> np.ndarray:
    """
    Pads an image on its trailing edges to make its dimensions divisible by a
    specified ratio. The original samples keep the top-left sub-rectangle.

    Args:
        image (np.ndarray): Input 2D (greyscale) numpy array.
        ratio (int, optional): Positive integer defining the divisibility constraint
            for the image dimensions. Defaults to PAD_RATIO.
        border_type (int, optional): Type of border for padding, as defined by
            OpenCV constants. Defaults to `cv2.BORDER_CONSTANT`.
        border_constant (int, optional): Constant pixel value for padding if
            `border_type` is `cv2.BORDER_CONSTANT`. Defaults to 0.

    Returns:
        np.ndarray: A padded copy whose dimensions are divisible by the given ratio.

    Raises:
        ValueError: If `image` is not a 2D numpy array.
        ValueError: If `ratio` is not a positive integer.
    """
    if not isinstance(image, np.ndarray) or image.ndim != 2:
        raise ValueError("Image must be a 2D numpy array")
    if ratio <= 0:
        raise ValueError("Ratio must be positive")

    rows, cols = image.shape

    quotient, remainder = divmod(rows, ratio)
    rows_to_add = 0 if remainder == 0 else (quotient + 1) * ratio - rows
    quotient, remainder = divmod(cols, ratio)
    cols_to_add = 0 if remainder == 0 else (quotient + 1) * ratio - cols

    if rows_to_add == 0 and cols_to_add == 0:
        return image.copy()

    return cv2.copyMakeBorder(image, 0, rows_to_add, 0, cols_to_add, border_type,
                              None, border_constant)


def get_padded_shape(width: int, height: int, ratio: int = PAD_RATIO) -> tuple[int, int]:
    """Returns (rows, cols) of a width x height image padded to multiples of ratio"""
    return -(-height // ratio) * ratio, -(-width // ratio) * ratio


def crop_to_shape(matrix: np.ndarray, width: int, height: int) -> np.ndarray:
    """Slices the trailing padding off, keeping the top-left height x width block"""
    if matrix.shape[0] < height or matrix.shape[1] < width:
        raise ValueError(f"Cannot crop {matrix.shape} to {height}x{width}")
    return matrix[:height, :width].copy()
