"""
Shared fixtures: deterministic fake encoders standing in for the
sentence-transformers model, and an engine wired to them.
"""

import re
import threading

import numpy as np
import pytest

from core.embedding_service import EmbeddingModelHandle, EmbeddingService
from core.retrieval_engine import RetrievalEngine

TOKEN = re.compile(r"[a-z0-9]+")


class BagOfWordsEncoder:
    """
    Each distinct lower-case token gets its own axis; vectors are L2-normalized
    token counts. Collision-free up to `dim` tokens.
    """

    def __init__(self, dim: int = 64):
        self.dim = dim
        self.vocab: dict[str, int] = {}
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def vector(self, text: str) -> np.ndarray:
        vec = np.zeros(self.dim, dtype=np.float32)
        with self._lock:
            for tok in TOKEN.findall(text.lower()):
                idx = self.vocab.setdefault(tok, len(self.vocab) % self.dim)
                vec[idx] += 1.0
        norm = np.linalg.norm(vec)
        return vec / norm if norm else vec

    def encode(self, sentences, **kwargs):
        self.calls.extend(sentences)
        return np.stack([self.vector(s) for s in sentences])


class FixedEncoder:
    """Returns the same vector for every input."""

    def __init__(self, vector):
        self.vec = np.asarray(vector, dtype=np.float32)
        self.calls: list[str] = []

    def encode(self, sentences, **kwargs):
        self.calls.extend(sentences)
        return np.stack([self.vec for _ in sentences])


def service_for(encoder, dim: int) -> EmbeddingService:
    return EmbeddingService(
        loader=lambda: EmbeddingModelHandle(model_name="fake", dimension=dim, encoder=encoder)
    )


@pytest.fixture
def encoder():
    return BagOfWordsEncoder()


@pytest.fixture
def embeddings(encoder):
    return service_for(encoder, encoder.dim)


@pytest.fixture
def engine(embeddings):
    return RetrievalEngine(embeddings, chunk_size=700, overlap=150)


@pytest.fixture
def two_page_document():
    return [
        (1, "The capital of France is Paris."),
        (2, "Rome is the capital of Italy."),
    ]
