import numpy as np
import pytest

from wavepress.errors import InvalidQuality
from wavepress.quantizer import quantization_step, quantize, dequantize, round_half_up


@pytest.mark.parametrize("quality, step", [(100, 1.0), (50, 2.0), (25, 4.0), (10, 10.0)])
def test_quantization_step(quality, step):
    assert quantization_step(quality) == pytest.approx(step)


def test_round_half_up_breaks_ties_upwards():
    np.testing.assert_array_equal(round_half_up([2.5, -2.5, 0.5, -0.5, 1.49]), [3, -2, 1, 0, 1])


def test_quantize_returns_integers():
    quantized = quantize(np.array([[10.0, -7.0], [4.9, 0.25]]), 50)
    assert quantized.dtype == np.int64
    np.testing.assert_array_equal(quantized, [[5, -3], [2, 0]])


def test_dequantize_scales_by_step():
    np.testing.assert_allclose(dequantize(np.array([5, -3, 0]), 50), [10.0, -6.0, 0.0])


def test_coarser_quality_loses_more_precision():
    coefficients = np.linspace(-50, 50, 101)
    fine = np.abs(dequantize(quantize(coefficients, 90), 90) - coefficients).max()
    coarse = np.abs(dequantize(quantize(coefficients, 10), 10) - coefficients).max()
    assert coarse > fine


@pytest.mark.parametrize("quality", [0, -5, 101, 2.5, "75", None, True])
def test_invalid_quality_is_rejected(quality):
    with pytest.raises(InvalidQuality):
        quantize(np.zeros((2, 2)), quality)
    with pytest.raises(InvalidQuality):
        dequantize(np.zeros((2, 2)), quality)


def test_invalid_quality_is_a_value_error():
    with pytest.raises(ValueError):
        quantization_step(0)
