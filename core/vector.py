# core/vector.py
from typing import Sequence, Union
import numpy as np
from util.errors import DimensionMismatch

Vector = Union[Sequence[float], np.ndarray]


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    dot(a, b) / (|a| * |b|), or 0.0 when either vector has zero norm.
    Raises DimensionMismatch when lengths differ.
    """
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatch(va.shape[0], vb.shape[0])

    scale_a = float(np.max(np.abs(va))) if va.size else 0.0
    scale_b = float(np.max(np.abs(vb))) if vb.size else 0.0
    if scale_a == 0.0 or scale_b == 0.0:
        return 0.0
    # max-abs 1 keeps the squares inside float range
    va = va / scale_a
    vb = vb / scale_b
    denom = np.sqrt(float(np.dot(va, va)) * float(np.dot(vb, vb)))
    return float(np.clip(np.dot(va, vb) / denom, -1.0, 1.0))
