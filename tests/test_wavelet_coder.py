import numpy as np
import pytest

from wavepress.errors import DimensionMismatch
from wavepress.wavelet_coder import HaarCoder, WaveletCoder


def reference_forward(matrix):
    """Row pass over the whole matrix, then column pass, written out with loops"""
    rows, cols = len(matrix), len(matrix[0])
    transformed = [[0.0] * cols for _ in range(rows)]
    for i in range(rows):
        row = matrix[i]
        for j in range(cols // 2):
            transformed[i][j] = (row[2 * j] + row[2 * j + 1]) / 2
            transformed[i][j + cols // 2] = (row[2 * j] - row[2 * j + 1]) / 2
    for j in range(cols):
        column = [transformed[i][j] for i in range(rows)]
        for i in range(rows // 2):
            transformed[i][j] = (column[2 * i] + column[2 * i + 1]) / 2
            transformed[i + rows // 2][j] = (column[2 * i] - column[2 * i + 1]) / 2
    return np.array(transformed)


@pytest.fixture
def coder():
    return HaarCoder()


def test_haar_coder_is_a_wavelet_coder(coder):
    assert isinstance(coder, WaveletCoder)


def test_forward_single_block_quadrants(coder):
    block = np.array([[8, 4], [2, 2]])
    np.testing.assert_array_equal(coder.forward(block), [[4.0, 1.0], [2.0, 1.0]])


def test_forward_matches_loop_reference(coder, rng):
    matrix = rng.integers(0, 256, size=(6, 8))
    np.testing.assert_array_equal(coder.forward(matrix), reference_forward(matrix.tolist()))


def test_inverse_undoes_forward(coder, rng):
    matrix = rng.integers(0, 256, size=(10, 12)).astype(np.float64)
    np.testing.assert_allclose(coder.inverse(coder.forward(matrix)), matrix, atol=1e-9)


def test_forward_does_not_mutate_input(coder, rng):
    matrix = rng.integers(0, 256, size=(4, 4)).astype(np.float64)
    snapshot = matrix.copy()
    coder.forward(matrix)
    coder.inverse(matrix)
    np.testing.assert_array_equal(matrix, snapshot)


def test_constant_matrix_has_no_detail(coder):
    coefficients = coder.forward(np.full((4, 6), 7.0))
    np.testing.assert_array_equal(coefficients[:2, :3], 7.0)
    np.testing.assert_array_equal(coefficients[2:, :], 0.0)
    np.testing.assert_array_equal(coefficients[:, 3:], 0.0)


@pytest.mark.parametrize("shape", [(3, 4), (4, 5), (1, 2)])
def test_odd_dimensions_are_rejected(coder, shape):
    with pytest.raises(DimensionMismatch):
        coder.forward(np.zeros(shape))
    with pytest.raises(DimensionMismatch):
        coder.inverse(np.zeros(shape))


def test_non_2d_input_is_rejected(coder):
    with pytest.raises(DimensionMismatch):
        coder.forward(np.zeros(4))
