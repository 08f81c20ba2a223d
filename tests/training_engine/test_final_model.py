import struct

import numpy as np
import pytest
from sklearn.linear_model import LinearRegression

from modules.algorithm_catalog import Algorithm, Kernel, VariantIdentifier
from modules.training_engine import FinalModel
from utils import constants
from utils.exceptions import DispatchError, ModelFormatError, UnknownVariantTag

HEADER_SIZE = struct.calcsize(constants.MODEL_HEADER_FORMAT)
FAMILY_OFFSET = 6
SUB_KIND_OFFSET = 7


@pytest.fixture
def final_model():
    X = np.arange(12.0).reshape(6, 2)
    y = X @ np.array([1.0, 2.0])
    estimator = LinearRegression().fit(X, y)
    return FinalModel.from_estimator(VariantIdentifier(Algorithm.LINEAR_REGRESSION), estimator, 2)


def _patched(blob: bytes, offset: int, value: int) -> bytes:
    data = bytearray(blob)
    data[offset] = value
    return bytes(data)


def test_blob_round_trip(final_model):
    blob = final_model.to_bytes()

    assert blob[:4] == constants.MODEL_MAGIC
    assert FinalModel.from_bytes(blob) == final_model


def test_sub_kind_survives_round_trip():
    model = FinalModel(VariantIdentifier(Algorithm.SVR, Kernel.SIGMOID), 3, b"payload")
    assert FinalModel.from_bytes(model.to_bytes()).variant == model.variant


def test_bad_magic(final_model):
    blob = b"XXXX" + final_model.to_bytes()[4:]
    with pytest.raises(ModelFormatError, match="magic"):
        FinalModel.from_bytes(blob)


def test_unsupported_version(final_model):
    blob = bytearray(final_model.to_bytes())
    struct.pack_into(">H", blob, 4, 99)
    with pytest.raises(ModelFormatError, match="Unsupported model format version 99"):
        FinalModel.from_bytes(bytes(blob))


def test_truncated_header():
    with pytest.raises(ModelFormatError, match="truncated"):
        FinalModel.from_bytes(b"AMLM")


def test_truncated_payload(final_model):
    with pytest.raises(ModelFormatError, match="length"):
        FinalModel.from_bytes(final_model.to_bytes()[:-1])


def test_corrupted_payload(final_model):
    blob = final_model.to_bytes()
    blob = _patched(blob, HEADER_SIZE + 5, blob[HEADER_SIZE + 5] ^ 0xFF)
    with pytest.raises(ModelFormatError, match="digest"):
        FinalModel.from_bytes(blob)


@pytest.mark.parametrize("offset,value", [(FAMILY_OFFSET, 0), (FAMILY_OFFSET, 200), (SUB_KIND_OFFSET, 3)])
def test_corrupted_tag_is_unknown(final_model, offset, value):
    blob = _patched(final_model.to_bytes(), offset, value)
    with pytest.raises(UnknownVariantTag) as exc_info:
        FinalModel.from_bytes(blob)
    assert isinstance(exc_info.value, DispatchError)


def test_save_and_load(final_model, tmp_path):
    path = final_model.save(tmp_path / "nested" / "model.aml")

    assert path.exists()
    assert FinalModel.load(path) == final_model


def test_load_missing_file(tmp_path):
    with pytest.raises(ModelFormatError, match="not found"):
        FinalModel.load(tmp_path / "missing.aml")
