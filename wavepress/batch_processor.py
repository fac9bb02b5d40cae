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

import time
import logging
import concurrent.futures
from pathlib import Path
from functools import wraps

import pandas as pd
from tqdm.auto import tqdm

from wavepress.errors import CodecError
from wavepress.pipeline import compress
from wavepress.normalization import normalize_quality_sweep
from wavepress.validation import validate_input_folder, validate_output_folder, validate_quality
from wavepress.config.aliases import QualitySweep
from wavepress.config.constants import (LOSSY, LOSSLESS, DEFAULT_QUALITY, LOSSLESS_ROW_WIDTH, IMAGE_EXTENSIONS,
                                        ARTIFACT_SUFFIX, RESULTS_FOLDER, FILE, ARTIFACT, KIND, QUALITY,
                                        ARTIFACT_BYTES, STATUS)

# Basic configs
logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
bar_format = '{desc}: {percentage:3.0f}%|{bar}|[{elapsed}]'

SUMMARY_COLUMNS = [FILE, ARTIFACT, KIND, QUALITY, ARTIFACT_BYTES, STATUS]
STATUS_OK = 'ok'


def preserve_quality(func):
    """
    Decorator that preserves the original quality value.
    Saves quality at the start of function and restores it at the end,
    regardless of any changes made within the function.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        original_quality = self.quality
        try:
            return func(self, *args, **kwargs)
        finally:
            self.quality = original_quality

    return wrapper


def format_proc_time(start: float, end: float) -> str:
    """
    Simple function to format processing time

    Args:
        start: Start time
        end: End time

    Returns:
        Time string in format: hours:minutes:seconds
    """
    total_seconds = int(end - start)

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    time_parts = []
    if hours > 0:
        time_parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    if minutes > 0 or (hours > 0 and seconds > 0):
        time_parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")
    if seconds > 0 or not time_parts:
        time_parts.append(f"{seconds} second{'s' if seconds != 1 else ''}")

    return " ".join(time_parts)


class CodecProcessor:
    """
    Compresses every file of a folder in parallel threads. See __init__ for more details.

    Each file is an independent compress call with its own destination, so the
    calls share no state. A failing file is recorded in the summary and the
    rest of the batch carries on.
    """

    def __init__(self,
                 data_folder: str | Path,
                 results_folder: str | Path = RESULTS_FOLDER,
                 mode: str = LOSSY,
                 quality: QualitySweep = DEFAULT_QUALITY,
                 row_width: int = LOSSLESS_ROW_WIDTH,
                 parallel: int = None,
                 log_info: bool = True):
        """
        Args:
            data_folder (str | Path): Folder with the files to compress.
            results_folder (str | Path): Where artifacts and the summary table go.
                Created when missing.
            mode (str): LOSSY or LOSSLESS.
            quality (QualitySweep): A quality or a sweep of them (lossy mode only).
            row_width (int): Row width of the lossless codec.
            parallel (int): Number of worker threads. Defaults to the executor's default.
            log_info (bool): Controls whether to log information about the initialized instance.

        Raises:
            ValueError: If mode is unknown.
            InvalidQuality: If any quality is invalid.
        """
        if mode not in (LOSSY, LOSSLESS):
            msg = f"Unknown compression mode: '{mode}'. Available modes: {LOSSY}, {LOSSLESS}"
            logging.error(msg)
            raise ValueError(msg)
        self.path = validate_input_folder(data_folder)
        self.results_folder = validate_output_folder(results_folder)
        self.mode = mode
        self.quality = tuple(validate_quality(q) for q in normalize_quality_sweep(quality))
        self.row_width = row_width
        self.parallel = parallel
        self._log_init_info() if log_info else None

    def _source_files(self) -> list[Path]:
        files = sorted(f for f in self.path.iterdir() if f.is_file())
        if self.mode == LOSSY:
            files = [f for f in files if f.suffix.lower() in IMAGE_EXTENSIONS]
        return files

    def _log_init_info(self):
        """Logs information about the initialized instance"""
        logging.info(f"Data folder: {self.path}")
        logging.info(f"Number of files: {len(self._source_files())}")
        logging.info(f"Mode: {self.mode}")
        if self.mode == LOSSY:
            logging.info(f"Quality: {self.quality}")
        else:
            logging.info(f"Row width: {self.row_width}")
        logging.info(f"Results folder: {self.results_folder}")

    def _artifact_path(self, source: Path, quality: int) -> Path:
        if self.mode == LOSSY:
            return self.results_folder / f"{source.stem}-q{quality}{ARTIFACT_SUFFIX}"
        return self.results_folder / f"{source.stem}-lossless{ARTIFACT_SUFFIX}"

    def _process_core(self, source: Path) -> dict:
        """Compresses one file and returns its summary row"""
        quality = self.quality
        artifact_path = self._artifact_path(source, quality)
        info = compress(source, artifact_path, mode=self.mode, quality=quality,
                        row_width=self.row_width)
        return {FILE: source.name, ARTIFACT: artifact_path.name, KIND: info.kind,
                QUALITY: info.quality, ARTIFACT_BYTES: info.size_bytes, STATUS: STATUS_OK}

    def _parallel_proc(self, files: list[Path], timeout: int = None) -> list[dict]:
        """
        Compresses files using parallel threads.

        On timeout, queued files are cancelled and the call returns without
        waiting for the workers. A compress call already running cannot be
        interrupted: it finishes in the background and may still write its
        artifact, even though its row reports "timeout".

        Args:
            files: Source files.
            timeout: The maximum time, in seconds, for the whole batch. Files not
                finished by then are reported as timed out.

        Returns:
            List of summary rows, one per file.
        """
        rows = {}
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=self.parallel)
        future_to_file = {executor.submit(self._process_core, f): f for f in files}
        timed_out = False

        with tqdm(total=len(future_to_file), desc=f"Compressing ({self.mode})",
                  bar_format=bar_format, mininterval=1) as pbar:
            try:
                for future in concurrent.futures.as_completed(future_to_file.keys(), timeout=timeout):
                    rows[future_to_file[future]] = self._collect(future, future_to_file[future])
                    pbar.update(1)
            except concurrent.futures.TimeoutError:
                timed_out = True
                logging.warning(f"Overall processing timed out after {timeout} seconds")
            finally:
                executor.shutdown(wait=not timed_out, cancel_futures=timed_out)

        # Files that finished between the timeout and the shutdown keep their real row
        for future, source in future_to_file.items():
            if source in rows:
                continue
            if future.done() and not future.cancelled():
                rows[source] = self._collect(future, source)
            else:
                rows[source] = self._failed_row(source, "timeout")

        return [rows[f] for f in files]

    def _collect(self, future: concurrent.futures.Future, source: Path) -> dict:
        """Returns the summary row of a finished future"""
        try:
            return future.result()
        except (CodecError, OSError) as exc:
            logging.warning(f"File {source.name} generated an exception: {exc}")
            return self._failed_row(source, f"error: {exc}")

    def _failed_row(self, source: Path, status: str) -> dict:
        return {FILE: source.name, ARTIFACT: None, KIND: self.mode,
                QUALITY: self.quality if self.mode == LOSSY else None,
                ARTIFACT_BYTES: None, STATUS: status}

    @preserve_quality
    def process_folder(self, timeout: int = None, save: bool = True) -> pd.DataFrame:
        """
        Compresses the folder at every configured quality (once in lossless mode).

        Args:
            timeout (int, optional): Timeout in seconds for each pass over the folder.
            save (bool): Write the summary to `<results_folder>/summary-<mode>.csv`.

        Returns:
            pd.DataFrame: One row per file and quality with the columns file,
            artifact, kind, quality, artifact_bytes and status.
        """
        files = self._source_files()
        start_time = time.time()

        rows = []
        passes = self.quality if self.mode == LOSSY else (None,)
        for quality in passes:
            self.quality = quality
            rows.extend(self._parallel_proc(files, timeout))

        summary = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
        if save:
            summary.to_csv(self.results_folder / f"summary-{self.mode}.csv", index=False)

        logging.info(f"Total processing time: {format_proc_time(start_time, time.time())}")
        return summary
