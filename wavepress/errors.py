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
Errors raised by the codecs.

Every error is a `CodecError`, and additionally subclasses the built-in
exception a caller would naturally catch (`OSError` for I/O, `ValueError`
for bad arguments and corrupt documents).
"""


class CodecError(Exception):
    """Base class for all codec errors."""


class RasterIOError(CodecError, OSError):
    """Source image unreadable or unsupported, or destination unwritable."""


class InvalidQuality(CodecError, ValueError):
    """Quality is not an integer in the configured range."""


class ArtifactFormatError(CodecError, ValueError):
    """Artifact document is missing fields or carries malformed values."""


class DimensionMismatch(ArtifactFormatError):
    """Matrix shape disagrees with the declared (or required) dimensions."""
