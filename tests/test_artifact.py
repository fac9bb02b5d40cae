import json

import numpy as np
import pytest

from wavepress.errors import ArtifactFormatError, DimensionMismatch, RasterIOError
from wavepress.artifact import (LossyArtifact, LosslessArtifact, parse_artifact, load_artifact,
                                save_artifact)
from wavepress.config.constants import LOSSY, LOSSLESS


def lossy_document(**overrides):
    document = {"width": 3, "height": 3, "quality": 75,
                "quantized": [[1, 2, 3, 4], [5, 6, 7, 8], [0, 0, 0, 0], [-1, -2, -3, -4]]}
    document.update(overrides)
    return document


def lossless_document(**overrides):
    document = {"width": 3, "height": 2, "residuals": [10, 1, -1, 20, 0, 5]}
    document.update(overrides)
    return document


def test_parse_lossy_document():
    artifact = parse_artifact(lossy_document())
    assert isinstance(artifact, LossyArtifact)
    assert artifact.kind == LOSSY
    assert (artifact.width, artifact.height, artifact.quality) == (3, 3, 75)
    assert artifact.quantized.shape == (4, 4)
    assert artifact.quantized.dtype == np.int64


def test_parse_lossless_document():
    artifact = parse_artifact(lossless_document())
    assert isinstance(artifact, LosslessArtifact)
    assert artifact.kind == LOSSLESS
    np.testing.assert_array_equal(artifact.residuals, [10, 1, -1, 20, 0, 5])


def test_documents_follow_schema():
    assert parse_artifact(lossy_document()).to_document() == lossy_document()
    assert parse_artifact(lossless_document()).to_document() == lossless_document()


@pytest.mark.parametrize("document", [
    [],
    "artifact",
    {"width": 2, "height": 2},
    {"width": 2, "height": 1, "quality": 50, "quantized": [[0, 0]], "residuals": [0, 0]},
])
def test_ambiguous_or_non_object_documents_are_rejected(document):
    with pytest.raises(ArtifactFormatError):
        parse_artifact(document)


@pytest.mark.parametrize("field", ["width", "height", "quality"])
def test_missing_lossy_field_is_rejected(field):
    document = lossy_document()
    del document[field]
    with pytest.raises(ArtifactFormatError):
        parse_artifact(document)


@pytest.mark.parametrize("value", [0, -4, True, 3.0, "3", None])
def test_invalid_dimension_is_rejected(value):
    with pytest.raises(ArtifactFormatError):
        parse_artifact(lossless_document(width=value))
    with pytest.raises(ArtifactFormatError):
        parse_artifact(lossy_document(height=value))


@pytest.mark.parametrize("quality", [0, -5, 101, 7.5])
def test_invalid_quality_in_document_is_rejected(quality):
    with pytest.raises(ArtifactFormatError):
        parse_artifact(lossy_document(quality=quality))


def test_quantized_shape_must_match_padded_dimensions():
    # 3x3 pads to 4x4, 5x3 pads to 4x6
    with pytest.raises(DimensionMismatch):
        parse_artifact(lossy_document(width=5))
    parse_artifact(lossy_document(width=4, height=4))


def test_ragged_quantized_is_rejected():
    with pytest.raises(ArtifactFormatError):
        parse_artifact(lossy_document(quantized=[[1, 2, 3, 4], [5, 6, 7], [0, 0, 0, 0], [1, 1, 1, 1]]))


@pytest.mark.parametrize("quantized", [
    [[1.5, 2, 3, 4]] * 4,
    [["a", "b", "c", "d"]] * 4,
    [[True, False, True, False]] * 4,
    [1, 2, 3, 4],
    {"rows": []},
])
def test_non_integer_quantized_is_rejected(quantized):
    with pytest.raises(ArtifactFormatError):
        parse_artifact(lossy_document(quantized=quantized))


@pytest.mark.parametrize("residuals", [[1, 2, 3], [1] * 7, [], [[1, 2, 3], [4, 5, 6]], [1, 2, 3, 4, 5, 6.5]])
def test_malformed_residuals_are_rejected(residuals):
    with pytest.raises(ArtifactFormatError):
        parse_artifact(lossless_document(residuals=residuals))


def test_constructor_validates_too():
    with pytest.raises(DimensionMismatch):
        LossyArtifact(width=2, height=2, quality=50, quantized=np.zeros((4, 4), dtype=np.int64))
    with pytest.raises(ArtifactFormatError):
        LosslessArtifact(width=2, height=0, residuals=np.zeros(0, dtype=np.int64))


def test_save_and_load(tmp_path):
    path = tmp_path / "artifact.json"
    artifact = parse_artifact(lossy_document())

    assert save_artifact(artifact, path) == path
    assert json.loads(path.read_text()) == lossy_document()

    loaded = load_artifact(path)
    assert isinstance(loaded, LossyArtifact)
    np.testing.assert_array_equal(loaded.quantized, artifact.quantized)
    assert [p.name for p in tmp_path.iterdir()] == ["artifact.json"]


def test_load_rejects_unexpected_kind(tmp_path):
    path = save_artifact(parse_artifact(lossless_document()), tmp_path / "artifact.json")
    with pytest.raises(ArtifactFormatError):
        load_artifact(path, expected_kind=LOSSY)
    assert load_artifact(path, expected_kind=LOSSLESS).kind == LOSSLESS


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"width": 3, "height": ')
    with pytest.raises(ArtifactFormatError):
        load_artifact(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(RasterIOError):
        load_artifact(tmp_path / "missing.json")


def test_save_to_missing_folder(tmp_path):
    with pytest.raises(RasterIOError):
        save_artifact(parse_artifact(lossless_document()), tmp_path / "missing" / "artifact.json")
