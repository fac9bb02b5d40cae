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
Artifact documents exchanged between the codecs and the storage layer.

An artifact is either a `LossyArtifact` or a `LosslessArtifact`. Both are
validated when constructed, so every artifact that exists in memory is
well formed; `parse_artifact` turns an untrusted JSON document into one of
them and rejects anything else with `ArtifactFormatError`.
"""

import os
import json
import logging
import tempfile
from pathlib import Path
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, ClassVar, Union

import numpy as np

from wavepress.errors import ArtifactFormatError, DimensionMismatch, InvalidQuality, RasterIOError
from wavepress.data_loader import get_padded_shape
from wavepress.normalization import normalize_path
from wavepress.validation import validate_quality
from wavepress.config.constants import LOSSY, LOSSLESS, WIDTH, HEIGHT, QUALITY, QUANTIZED, RESIDUALS


def _fail(msg: str, error: type[ArtifactFormatError] = ArtifactFormatError):
    logging.error(msg)
    raise error(msg)


def _check_dimension(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        _fail(f"Artifact field '{name}' must be an integer, got {value!r}")
    if value <= 0:
        _fail(f"Artifact field '{name}' must be positive, got {value}")
    return int(value)


def _as_integer_array(name: str, values: Any, ndim: int) -> np.ndarray:
    """Converts nested lists into an int64 array, rejecting ragged or non-integer data"""
    if isinstance(values, np.ndarray):
        array = values
    elif isinstance(values, list):
        try:
            array = np.array(values)
        except ValueError:
            _fail(f"Artifact field '{name}' is not a rectangular array")
    else:
        _fail(f"Artifact field '{name}' must be an array, got {type(values).__name__}")

    if array.ndim != ndim:
        _fail(f"Artifact field '{name}' must be a {ndim}D array, got {array.ndim}D")
    if array.size and array.dtype.kind not in 'iu':
        _fail(f"Artifact field '{name}' must contain only integers")
    return array.astype(np.int64)


@dataclass(frozen=True, eq=False)
class LossyArtifact:
    """
    Output of the wavelet codec.

    Attributes:
        width: Original (unpadded) image width.
        height: Original (unpadded) image height.
        quality: Quality the coefficients were quantized with.
        quantized: int64 matrix with the padded shape.
    """
    width: int
    height: int
    quality: int
    quantized: np.ndarray

    kind: ClassVar[str] = LOSSY

    def __post_init__(self):
        object.__setattr__(self, 'width', _check_dimension(WIDTH, self.width))
        object.__setattr__(self, 'height', _check_dimension(HEIGHT, self.height))
        try:
            object.__setattr__(self, 'quality', validate_quality(self.quality))
        except InvalidQuality as e:
            raise ArtifactFormatError(f"Artifact field '{QUALITY}' is invalid: {e}") from e

        quantized = _as_integer_array(QUANTIZED, self.quantized, ndim=2)
        expected = get_padded_shape(self.width, self.height)
        if quantized.shape != expected:
            _fail(f"Quantized matrix has shape {quantized.shape}, "
                  f"expected {expected} for a {self.width}x{self.height} image", DimensionMismatch)
        object.__setattr__(self, 'quantized', quantized)

    def to_document(self) -> dict[str, Any]:
        return {WIDTH: self.width, HEIGHT: self.height, QUALITY: self.quality,
                QUANTIZED: self.quantized.tolist()}


@dataclass(frozen=True, eq=False)
class LosslessArtifact:
    """
    Output of the predictive codec.

    Attributes:
        width: Row width the residuals were framed with.
        height: Number of rows.
        residuals: Flat int64 sequence of width * height residuals, row-major.
    """
    width: int
    height: int
    residuals: np.ndarray

    kind: ClassVar[str] = LOSSLESS

    def __post_init__(self):
        object.__setattr__(self, 'width', _check_dimension(WIDTH, self.width))
        object.__setattr__(self, 'height', _check_dimension(HEIGHT, self.height))

        residuals = _as_integer_array(RESIDUALS, self.residuals, ndim=1)
        if residuals.size != self.width * self.height:
            _fail(f"Residual sequence has {residuals.size} entries, "
                  f"expected {self.width * self.height} ({self.width}x{self.height})")
        object.__setattr__(self, 'residuals', residuals)

    def to_document(self) -> dict[str, Any]:
        return {WIDTH: self.width, HEIGHT: self.height, RESIDUALS: self.residuals.tolist()}


Artifact = Union[LossyArtifact, LosslessArtifact]


def parse_artifact(document: Any) -> Artifact:
    """
    Builds a typed artifact from a decoded JSON document.

    The variant is chosen by which payload field is present: `quantized`
    for lossy artifacts, `residuals` for lossless ones.

    Args:
        document: The decoded JSON value.

    Returns:
        Artifact: A validated LossyArtifact or LosslessArtifact.

    Raises:
        ArtifactFormatError: If the document is not an object, has neither or
            both payload fields, or misses / carries malformed fields.
        DimensionMismatch: If the quantized matrix shape disagrees with the
            declared dimensions.
    """
    if not isinstance(document, Mapping):
        _fail(f"Artifact must be a JSON object, got {type(document).__name__}")

    has_quantized, has_residuals = QUANTIZED in document, RESIDUALS in document
    if has_quantized == has_residuals:
        _fail(f"Artifact must carry exactly one of '{QUANTIZED}' or '{RESIDUALS}'")

    required = (WIDTH, HEIGHT, QUALITY, QUANTIZED) if has_quantized else (WIDTH, HEIGHT, RESIDUALS)
    missing = [field for field in required if field not in document]
    if missing:
        _fail(f"Artifact is missing required field(s): {', '.join(missing)}")

    if has_quantized:
        return LossyArtifact(width=document[WIDTH], height=document[HEIGHT],
                             quality=document[QUALITY], quantized=document[QUANTIZED])
    return LosslessArtifact(width=document[WIDTH], height=document[HEIGHT],
                            residuals=document[RESIDUALS])


def load_artifact(file_path: str | Path, expected_kind: str = None) -> Artifact:
    """
    Reads and validates an artifact file.

    Args:
        file_path (str | Path): Artifact path.
        expected_kind (str, optional): LOSSY or LOSSLESS. Any other kind found in
            the file is rejected. Defaults to None (accept both).

    Raises:
        RasterIOError: If the file cannot be read.
        ArtifactFormatError: If the file is not valid JSON, not a valid artifact,
            or not of the expected kind.
    """
    file_path = normalize_path(file_path)
    try:
        text = file_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read artifact {file_path}: {e}"
        logging.error(msg)
        raise RasterIOError(msg) from e

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Artifact {file_path} is not valid JSON: {e}"
        logging.error(msg)
        raise ArtifactFormatError(msg) from e

    artifact = parse_artifact(document)
    if expected_kind is not None and artifact.kind != expected_kind:
        _fail(f"Artifact {file_path} is {artifact.kind}, expected {expected_kind}")
    return artifact


def save_artifact(artifact: Artifact, file_path: str | Path) -> Path:
    """
    Writes the artifact document as compact JSON.

    The document goes to a temporary sibling first and is renamed into place,
    so a reader never observes a half-written artifact.

    Raises:
        RasterIOError: If the destination cannot be written.
    """
    file_path = normalize_path(file_path)
    payload = json.dumps(artifact.to_document(), separators=(',', ':'))

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=file_path.parent,
                                         prefix=f".{file_path.name}.", suffix='.tmp',
                                         delete=False) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
        os.replace(tmp_name, file_path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.remove(tmp_name)
        msg = f"Failed to write artifact {file_path}: {e}"
        logging.error(msg)
        raise RasterIOError(msg) from e

    return file_path
