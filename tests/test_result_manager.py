import math

import pandas as pd
import pytest

from wavepress.errors import InvalidQuality
from wavepress.config.constants import QUALITY_SWEEP
from wavepress.result_manager import (SWEEP_COLUMNS, evaluate_quality_sweep, is_error_monotone,
                                      save_sweep_results, load_sweep_results)


@pytest.fixture
def sweep(write_png, noise_image, tmp_path):
    # Coarse anchors only; neighbouring qualities are not guaranteed to be ordered
    return evaluate_quality_sweep(write_png(noise_image), tmp_path / "work", qualities=[100, 10, 50, 25])


def test_sweep_table(sweep, tmp_path):
    assert list(sweep.columns) == SWEEP_COLUMNS
    assert sweep["quality"].tolist() == [10, 25, 50, 100]
    assert (sweep["artifact_bytes"] > 0).all()
    assert sorted(p.name for p in (tmp_path / "work").iterdir()) == [
        "source-q10.json", "source-q100.json", "source-q25.json", "source-q50.json"]


def test_error_is_monotone_across_coarse_anchors(sweep):
    assert is_error_monotone(sweep)
    assert is_error_monotone(sweep, "mse")
    # Finer steps produce larger documents
    assert sweep["artifact_bytes"].iloc[-1] > sweep["artifact_bytes"].iloc[0]


def test_full_sweep_error_is_not_monotone(write_png, gradient_image, tmp_path):
    sweep = evaluate_quality_sweep(write_png(gradient_image), tmp_path / "work").set_index("quality")

    assert sweep.index.tolist() == list(QUALITY_SWEEP)
    assert not is_error_monotone(sweep.reset_index())
    assert sweep.loc[85, "mae"] == pytest.approx(0.35)
    assert sweep.loc[100, "mae"] == pytest.approx(0.5)
    assert sweep.loc[10, "mae"] > sweep.loc[100, "mae"]


def test_is_error_monotone_detects_regression():
    sweep = pd.DataFrame({"quality": [10, 50, 100], "mae": [4.0, 1.0, 2.0]})
    assert not is_error_monotone(sweep)
    assert is_error_monotone(sweep.assign(mae=[4.0, 2.0, 2.0]))
    with pytest.raises(ValueError):
        is_error_monotone(sweep, "ssim")


def test_invalid_quality_in_sweep(write_png, noise_image, tmp_path):
    with pytest.raises(InvalidQuality):
        evaluate_quality_sweep(write_png(noise_image), tmp_path / "work", qualities=range(0, 101, 50))


def test_save_and_load(sweep, tmp_path):
    paths = save_sweep_results(sweep, tmp_path / "results", "noise")
    assert paths.regular.exists() and paths.summary.exists()

    loaded = load_sweep_results(tmp_path / "results", "noise")
    pd.testing.assert_frame_equal(loaded, sweep, check_dtype=False)

    summary = load_sweep_results(tmp_path / "results", "noise", summary=True)
    assert summary.loc["count", "quality"] == 4
    assert math.isclose(summary.loc["max", "quality"], 100)


def test_load_missing_results(tmp_path):
    (tmp_path / "results").mkdir()
    assert load_sweep_results(tmp_path / "results", "missing") is None
