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

from wavepress.errors import ArtifactFormatError
from wavepress.artifact import LosslessArtifact, load_artifact, save_artifact
from wavepress.data_loader import read_raw_bytes, write_raw_bytes
from wavepress.config.constants import LOSSLESS, LOSSLESS_ROW_WIDTH, PIXEL_MIN, PIXEL_MAX


def encode_residuals(data: bytes, width: int) -> tuple[np.ndarray, int]:
    """
    Computes left-neighbour prediction residuals of a byte sequence.

    The bytes are framed into rows of `width`; trailing bytes that do not fill
    a whole row are dropped. The first sample of every row is predicted as 0.

    Args:
        data (bytes): Raw byte sequence.
        width (int): Row width.

    Returns:
        tuple[np.ndarray, int]: Flat int64 residuals (row-major) and the row count.
    """
    height = len(data) // width
    if height == 0:
        return np.empty(0, dtype=np.int64), 0

    samples = np.frombuffer(data, dtype=np.uint8, count=height * width)
    samples = samples.astype(np.int64).reshape(height, width)

    residuals = samples.copy()
    residuals[:, 1:] = samples[:, 1:] - samples[:, :-1]
    return residuals.ravel(), height


def decode_residuals(residuals: np.ndarray, width: int, height: int) -> bytes:
    """
    Rebuilds the byte sequence from residuals.

    Every reconstructed sample is clamped to [0, 255] before it becomes the
    prediction for its right neighbour, so out-of-range residuals saturate
    instead of wrapping.
    """
    residuals = np.asarray(residuals, dtype=np.int64).reshape(height, width)
    reconstructed = np.empty((height, width), dtype=np.int64)

    # Columns are sequential, rows are independent
    previous = np.zeros(height, dtype=np.int64)
    for x in range(width):
        previous = np.clip(residuals[:, x] + previous, PIXEL_MIN, PIXEL_MAX)
        reconstructed[:, x] = previous

    return reconstructed.astype(np.uint8).tobytes()


class LosslessCodec:
    """
    Predictive (delta) codec over raw file bytes.

    The file is treated as rows of a fixed width that has nothing to do with
    any image geometry; no raster decoding happens on either side.
    """

    def __init__(self, row_width: int = LOSSLESS_ROW_WIDTH):
        if isinstance(row_width, bool) or not isinstance(row_width, int) or row_width <= 0:
            msg = f"Row width must be a positive integer, got {row_width!r}"
            logging.error(msg)
            raise ValueError(msg)
        self.row_width = row_width

    def encode(self, data: bytes) -> LosslessArtifact:
        """Encodes an in-memory byte sequence"""
        residuals, height = encode_residuals(data, self.row_width)
        if height == 0:
            msg = f"Input of {len(data)} bytes is shorter than one row of {self.row_width} bytes"
            logging.error(msg)
            raise ArtifactFormatError(msg)

        dropped = len(data) - height * self.row_width
        if dropped:
            logging.warning(f"Dropping {dropped} trailing byte(s) that do not fill a row of {self.row_width}")

        return LosslessArtifact(width=self.row_width, height=height, residuals=residuals)

    def compress(self, src_path: str | Path, dst_artifact_path: str | Path) -> LosslessArtifact:
        """
        Compresses any file into a lossless artifact file.

        Returns:
            LosslessArtifact: The written artifact.

        Raises:
            RasterIOError: If the source cannot be read or the artifact written.
            ArtifactFormatError: If the source is shorter than one row.
        """
        artifact = self.encode(read_raw_bytes(src_path))
        save_artifact(artifact, dst_artifact_path)

        logging.info(f"Lossless compression complete: {src_path} -> {dst_artifact_path} "
                     f"({artifact.width}x{artifact.height})")
        return artifact

    @staticmethod
    def decode(artifact: LosslessArtifact) -> bytes:
        """Decodes an artifact into its byte sequence"""
        return decode_residuals(artifact.residuals, artifact.width, artifact.height)

    def decompress(self, src_artifact_path: str | Path, dst_path: str | Path) -> Path:
        """
        Decompresses a lossless artifact file into a raw byte stream.

        The artifact's own width is used, not the codec's row width. No
        container header is written.

        Raises:
            ArtifactFormatError: If the artifact is malformed or lossy. No output
                file is written in that case.
            RasterIOError: If the artifact cannot be read or the output written.
        """
        artifact = load_artifact(src_artifact_path, expected_kind=LOSSLESS)
        return self.write(artifact, dst_path)

    def write(self, artifact: LosslessArtifact, dst_path: str | Path) -> Path:
        """Decodes an already loaded artifact into a raw byte file"""
        path = write_raw_bytes(self.decode(artifact), dst_path)

        logging.info(f"Lossless decompression complete: {path} ({artifact.width}x{artifact.height})")
        return path
