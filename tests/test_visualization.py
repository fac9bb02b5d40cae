import numpy as np
import pandas as pd
import pytest
import matplotlib.pyplot as plt

from wavepress.visualization import plot_error_vs_quality, show_reconstruction


def test_plot_error_vs_quality():
    sweep = pd.DataFrame({"quality": [10, 50, 100], "mae": [4.0, 1.0, 0.5]})
    fig = plot_error_vs_quality(sweep)
    try:
        ax = fig.axes[0]
        assert ax.get_xlabel() == "Quality"
        assert ax.get_ylabel() == "MAE"
    finally:
        plt.close(fig)


def test_plot_unknown_metric():
    with pytest.raises(ValueError):
        plot_error_vs_quality(pd.DataFrame({"quality": [10]}), metric="ssim")


def test_show_reconstruction(gradient_image):
    noisy = np.clip(gradient_image.astype(int) + 3, 0, 255).astype(np.uint8)
    fig = show_reconstruction(gradient_image, noisy)
    try:
        assert len(fig.axes) == 3
        assert "PSNR" in fig.axes[1].get_title()
    finally:
        plt.close(fig)


def test_show_reconstruction_requires_greyscale(gradient_image):
    with pytest.raises(ValueError):
        show_reconstruction(np.dstack([gradient_image] * 3), gradient_image)
