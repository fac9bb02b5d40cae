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
Entry points called by the surrounding upload/decompress service.

The service owns file lifecycle and request parsing; it hands over a source
path and a destination path and gets back artifact metadata (compression)
or the written output path (decompression). Awaitable variants run the same
blocking call in a worker thread, so a timeout wraps the whole call:

    info = await asyncio.wait_for(compress_async(src, dst, quality=60), timeout=30)
"""

import asyncio
from pathlib import Path
from dataclasses import dataclass

from wavepress.artifact import Artifact, load_artifact
from wavepress.lossy_codec import LossyCodec
from wavepress.lossless_codec import LosslessCodec
from wavepress.normalization import normalize_path
from wavepress.config.constants import DEFAULT_QUALITY, LOSSLESS_ROW_WIDTH, LOSSY, LOSSLESS


@dataclass(frozen=True)
class ArtifactInfo:
    """Metadata of a written artifact"""
    kind: str
    path: Path
    width: int
    height: int
    quality: int | None
    size_bytes: int


def _describe(artifact: Artifact, path: str | Path) -> ArtifactInfo:
    path = normalize_path(path)
    return ArtifactInfo(kind=artifact.kind,
                        path=path,
                        width=artifact.width,
                        height=artifact.height,
                        quality=getattr(artifact, 'quality', None),
                        size_bytes=path.stat().st_size)


def compress_lossy(src_path: str | Path, dst_path: str | Path, quality: int = DEFAULT_QUALITY) -> ArtifactInfo:
    """Compresses an image with the wavelet codec"""
    artifact = LossyCodec().compress(src_path, dst_path, quality)
    return _describe(artifact, dst_path)


def decompress_lossy(src_path: str | Path, dst_path: str | Path) -> Path:
    """Reconstructs an image from a lossy artifact"""
    return LossyCodec().decompress(src_path, dst_path)


def compress_lossless(src_path: str | Path, dst_path: str | Path,
                      row_width: int = LOSSLESS_ROW_WIDTH) -> ArtifactInfo:
    """Compresses any file with the predictive codec"""
    artifact = LosslessCodec(row_width).compress(src_path, dst_path)
    return _describe(artifact, dst_path)


def decompress_lossless(src_path: str | Path, dst_path: str | Path) -> Path:
    """Reconstructs the raw byte stream from a lossless artifact"""
    return LosslessCodec().decompress(src_path, dst_path)


def compress(src_path: str | Path,
             dst_path: str | Path,
             mode: str = LOSSY,
             quality: int = DEFAULT_QUALITY,
             row_width: int = LOSSLESS_ROW_WIDTH
             ) -> ArtifactInfo:
    """
    Compresses with the codec selected by `mode`.

    Args:
        src_path: Source image (lossy) or any file (lossless).
        dst_path: Artifact destination.
        mode: LOSSY or LOSSLESS.
        quality: Lossy quality, ignored by the lossless codec.
        row_width: Lossless row width, ignored by the lossy codec.

    Raises:
        ValueError: If mode is unknown.
    """
    if mode == LOSSY:
        return compress_lossy(src_path, dst_path, quality)
    if mode == LOSSLESS:
        return compress_lossless(src_path, dst_path, row_width)
    raise ValueError(f"Unknown compression mode: '{mode}'. Available modes: {LOSSY}, {LOSSLESS}")


def decompress(src_path: str | Path, dst_path: str | Path) -> Path:
    """Decompresses with the codec matching the artifact's kind"""
    artifact = load_artifact(src_path)
    codec = LossyCodec() if artifact.kind == LOSSY else LosslessCodec(artifact.width)
    return codec.write(artifact, dst_path)


async def compress_async(src_path: str | Path, dst_path: str | Path, **options) -> ArtifactInfo:
    """Awaitable `compress`; the work runs in a worker thread"""
    return await asyncio.to_thread(compress, src_path, dst_path, **options)


async def decompress_async(src_path: str | Path, dst_path: str | Path) -> Path:
    """Awaitable `decompress`; the work runs in a worker thread"""
    return await asyncio.to_thread(decompress, src_path, dst_path)
