"""
Tagged byte representation of a trained final model.

Layout (big-endian):

    magic (4s) | format version (H) | family code (B) | sub-kind code (B) |
    feature count (I) | sha256 of payload (32s) | payload length (Q) | payload

The payload is the joblib-serialized fitted estimator. The tag alone decides
how the payload is interpreted; no other state is needed to predict.
"""
import hashlib
import io
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import joblib

from modules.algorithm_catalog import AlgorithmCatalog, VariantIdentifier
from utils import constants
from utils.exceptions import ModelFormatError, UnknownVariantTag

_HEADER = struct.Struct(constants.MODEL_HEADER_FORMAT)


@dataclass(frozen=True)
class FinalModel:
    variant: VariantIdentifier
    n_features: int
    payload: bytes

    @classmethod
    def from_estimator(cls, variant: VariantIdentifier, estimator, n_features: int) -> "FinalModel":
        buffer = io.BytesIO()
        joblib.dump(estimator, buffer, compress=constants.MODEL_PAYLOAD_COMPRESSION)
        return cls(variant=variant, n_features=n_features, payload=buffer.getvalue())

    def to_bytes(self) -> bytes:
        family_code, sub_code = self.variant.tag
        header = _HEADER.pack(
            constants.MODEL_MAGIC,
            constants.MODEL_FORMAT_VERSION,
            family_code,
            sub_code,
            self.n_features,
            hashlib.sha256(self.payload).digest(),
            len(self.payload),
        )
        return header + self.payload

    @classmethod
    def from_bytes(cls, blob: bytes) -> "FinalModel":
        """
        Parse a blob produced by `to_bytes`.

        Raises:
            ModelFormatError: Bad magic, unsupported version, truncation or digest mismatch.
            UnknownVariantTag: The tag names no catalog variant.
        """
        if len(blob) < _HEADER.size:
            raise ModelFormatError(f"Model blob truncated: {len(blob)} bytes, header needs {_HEADER.size}.")

        magic, version, family_code, sub_code, n_features, digest, length = _HEADER.unpack_from(blob)
        if magic != constants.MODEL_MAGIC:
            raise ModelFormatError(f"Not a final-model blob (magic {magic!r}).")
        if version not in constants.SUPPORTED_MODEL_FORMAT_VERSIONS:
            raise ModelFormatError(
                f"Unsupported model format version {version}. "
                f"Supported: {list(constants.SUPPORTED_MODEL_FORMAT_VERSIONS)}"
            )

        payload = blob[_HEADER.size:]
        if len(payload) != length:
            raise ModelFormatError(f"Payload length mismatch: header says {length}, found {len(payload)}.")
        if hashlib.sha256(payload).digest() != digest:
            raise ModelFormatError("Payload digest mismatch; the model blob is corrupt.")

        variant = AlgorithmCatalog.variant_from_tag(family_code, sub_code)
        if variant is None:
            raise UnknownVariantTag(f"Tag ({family_code}, {sub_code}) does not name a catalog variant.")

        return cls(variant=variant, n_features=n_features, payload=payload)

    def save(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_bytes())
        return path

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FinalModel":
        path = Path(path)
        if not path.exists():
            raise ModelFormatError(f"Model file not found: {path}")
        return cls.from_bytes(path.read_bytes())
