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

from wavepress.artifact import LossyArtifact, load_artifact, save_artifact
from wavepress.data_loader import decode_greyscale, encode_from_buffer, get_padded_copy, crop_to_shape
from wavepress.quantizer import quantize, dequantize, round_half_up
from wavepress.validation import validate_image, validate_quality
from wavepress.wavelet_coder import WaveletCoder, HaarCoder
from wavepress.config.constants import DEFAULT_QUALITY, LOSSY, PIXEL_MIN, PIXEL_MAX


class LossyCodec:
    """
    Wavelet-based lossy codec.

    Compression decodes the source to greyscale, zero-pads it to even
    dimensions, applies one level of the wavelet transform and quantizes the
    coefficients. Decompression mirrors these steps, clamps the samples to
    the 8-bit range and crops the padding away before encoding the image.

    The codec keeps no state between calls.
    """

    def __init__(self, wavelet_coder: WaveletCoder = None):
        """
        Args:
            wavelet_coder (WaveletCoder, optional): Transform to use. Defaults to HaarCoder.
        """
        self.coder = wavelet_coder if wavelet_coder is not None else HaarCoder()

    def encode(self, image: np.ndarray, quality: int = DEFAULT_QUALITY) -> LossyArtifact:
        """Encodes an in-memory greyscale pixel matrix"""
        quality = validate_quality(quality)
        validate_image(image)

        height, width = image.shape
        padded = get_padded_copy(image)
        coefficients = self.coder.forward(padded)

        return LossyArtifact(width=width, height=height, quality=quality,
                             quantized=quantize(coefficients, quality))

    def reconstruct(self, artifact: LossyArtifact) -> np.ndarray:
        """
        Rebuilds the greyscale pixel matrix stored in an artifact.

        Returns:
            np.ndarray: uint8 matrix of the original (height, width).
        """
        coefficients = dequantize(artifact.quantized, artifact.quality)
        padded = self.coder.inverse(coefficients)

        # Quantization may overshoot the 8-bit range
        padded = np.clip(round_half_up(padded), PIXEL_MIN, PIXEL_MAX).astype(np.uint8)
        return crop_to_shape(padded, artifact.width, artifact.height)

    def compress(self, src_image_path: str | Path, dst_artifact_path: str | Path,
                 quality: int = DEFAULT_QUALITY) -> LossyArtifact:
        """
        Compresses an image file into a lossy artifact file.

        Args:
            src_image_path: Any image OpenCV can decode. It is never deleted.
            dst_artifact_path: Where the JSON artifact is written.
            quality: Integer in [QUALITY_MIN, QUALITY_MAX].

        Returns:
            LossyArtifact: The written artifact.

        Raises:
            InvalidQuality: Before anything is read or written.
            RasterIOError: If the source cannot be decoded or the artifact written.
        """
        quality = validate_quality(quality)
        image, width, height = decode_greyscale(src_image_path)

        artifact = self.encode(image, quality)
        save_artifact(artifact, dst_artifact_path)

        logging.info(f"Lossy compression complete: {src_image_path} -> {dst_artifact_path} "
                     f"({width}x{height}, quality {quality})")
        return artifact

    def decompress(self, src_artifact_path: str | Path, dst_image_path: str | Path) -> Path:
        """
        Decompresses a lossy artifact file into an image file.

        Returns:
            Path: The written image path.

        Raises:
            ArtifactFormatError: If the artifact is malformed or lossless.
            DimensionMismatch: If the quantized shape disagrees with the dimensions.
            RasterIOError: If the artifact cannot be read or the image written.
        """
        artifact = load_artifact(src_artifact_path, expected_kind=LOSSY)
        return self.write(artifact, dst_image_path)

    def write(self, artifact: LossyArtifact, dst_image_path: str | Path) -> Path:
        """Reconstructs an already loaded artifact into an image file"""
        image = self.reconstruct(artifact)
        path = encode_from_buffer(image, artifact.width, artifact.height, dst_image_path)

        logging.info(f"Lossy decompression complete: {path} ({artifact.width}x{artifact.height})")
        return path
