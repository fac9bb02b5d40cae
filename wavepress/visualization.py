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

import numpy as np
import seaborn as sns
import matplotlib.pyplot as plt
from typing import TYPE_CHECKING

from wavepress.validation import validate_image
from wavepress.metrics import mean_absolute_error, psnr
from wavepress.config.constants import QUALITY, MAE

if TYPE_CHECKING:
    import pandas as pd


def plot_error_vs_quality(sweep: 'pd.DataFrame',
                          metric: str = MAE,
                          figsize: tuple[int, int] = (8, 5)
                          ) -> plt.Figure:
    """
    Draws a reconstruction metric against quality for a sweep produced by
    `result_manager.evaluate_quality_sweep`.

    Args:
        sweep (pd.DataFrame): Sweep data with a `quality` column.
        metric (str): Column to plot. Defaults to mean absolute error.
        figsize (tuple[int, int]): Figure size in inches.

    Returns:
        plt.Figure: The figure, left open for the caller to show or save.

    Raises:
        ValueError: If the metric is not found in the sweep data.
    """
    if metric not in sweep.columns:
        raise ValueError(f"Metric '{metric}' not found in sweep data.")

    fig, ax = plt.subplots(figsize=figsize)
    sns.lineplot(data=sweep, x=QUALITY, y=metric, marker='o', ax=ax)
    ax.set_title(f"{metric.upper()} vs quality")
    ax.set_xlabel("Quality")
    ax.set_ylabel(metric.upper())
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def show_reconstruction(original: np.ndarray,
                        reconstructed: np.ndarray,
                        figsize: tuple[int, int] = None
                        ) -> plt.Figure:
    """
    Displays the original greyscale image next to its reconstruction and the
    absolute difference between them.

    Returns:
        plt.Figure: The figure, left open for the caller to show or save.
    """
    validate_image(original)
    validate_image(reconstructed)

    if figsize is None:
        figsize = (12, 4)
        logging.debug(f'No figsize provided. Using default figsize: {figsize}')

    fig, ax = plt.subplots(1, 3, figsize=figsize)
    difference = np.abs(original.astype(np.int16) - reconstructed.astype(np.int16))

    ax[0].imshow(original, cmap='gray', vmin=0, vmax=255)
    ax[0].set_title(f"Source, shape = {original.shape}")
    ax[1].imshow(reconstructed, cmap='gray', vmin=0, vmax=255)
    ax[1].set_title(f"Reconstruction, PSNR = {psnr(original, reconstructed):.2f} dB")
    ax[2].imshow(difference, cmap='magma')
    ax[2].set_title(f"Difference, MAE = {mean_absolute_error(original, reconstructed):.3f}")

    for axis in ax:
        axis.axis('off')

    fig.tight_layout()
    return fig
