# core/embedding_service.py
import os
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol, Sequence
import numpy as np
from config.settings import settings
from util.errors import EmbeddingFailure
from util.timing import timed
import logging

logger = logging.getLogger(__name__)

POOLING_MODE = "mean"


class Encoder(Protocol):
    """Anything exposing SentenceTransformer.encode's batch signature."""

    def encode(self, sentences: List[str], **kwargs: Any) -> Any: ...


@dataclass(frozen=True)
class EmbeddingModelHandle:
    model_name: str
    dimension: int
    encoder: Encoder = field(repr=False, compare=False)

    def encode(self, text: str) -> np.ndarray:
        out = self.encoder.encode(
            [text],
            convert_to_numpy=True,
            normalize_embeddings=True,
            show_progress_bar=False,
        )
        arr = np.asarray(out, dtype=np.float32)
        if arr.ndim == 2:
            arr = arr[0] if arr.shape[0] else arr.reshape(-1)
        return arr


def _is_local_path(name: str) -> bool:
    if os.path.isabs(name) or name.startswith((".", "~")):
        return True
    return os.path.exists(os.path.expanduser(name))


def load_sentence_transformer(
    model_name: Optional[str] = None,
    device: Optional[str] = None,
    allow_local: Optional[bool] = None,
) -> EmbeddingModelHandle:
    """
    Build a Transformer -> mean Pooling -> Normalize pipeline from the hub.

    Filesystem paths are refused unless ALLOW_LOCAL_MODELS is set, and remote
    code is never trusted.
    """
    name = model_name or settings.EMBEDDING_MODEL_NAME
    dev = device or settings.EMBEDDING_DEVICE
    local_ok = settings.ALLOW_LOCAL_MODELS if allow_local is None else allow_local
    if not local_ok and _is_local_path(name):
        raise EmbeddingFailure(f"local model paths are not allowed: {name!r}")

    from sentence_transformers import SentenceTransformer, models

    with timed(logger, "embed.model.load", model=name, device=dev):
        word = models.Transformer(
            name,
            model_args={"trust_remote_code": False},
            tokenizer_args={"trust_remote_code": False},
        )
        dim = word.get_word_embedding_dimension()
        pooling = models.Pooling(dim, pooling_mode=POOLING_MODE)
        model = SentenceTransformer(
            modules=[word, pooling, models.Normalize()], device=dev
        )
    return EmbeddingModelHandle(model_name=name, dimension=dim, encoder=model)


class _ModelCell:
    """
    Initialize-once cell. The first caller runs the loader; everyone arriving
    before it finishes waits on the same future. A failed load clears the
    cell so a later call can try again.
    """

    def __init__(self, loader: Callable[[], EmbeddingModelHandle]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._future: Optional["Future[EmbeddingModelHandle]"] = None

    @property
    def resolved(self) -> bool:
        fut = self._future
        return fut is not None and fut.done() and fut.exception() is None

    def get(self) -> EmbeddingModelHandle:
        with self._lock:
            fut = self._future
            owner = fut is None
            if owner:
                fut = Future()
                self._future = fut

        if owner:
            try:
                handle = self._loader()
            except BaseException as e:
                with self._lock:
                    self._future = None
                fut.set_exception(e)
                raise
            fut.set_result(handle)
            return handle

        return fut.result()


class EmbeddingService:
    """
    Text -> L2-normalized vector, hiding model loading and its concurrency.
    One handle per service for the life of the process; no teardown.
    """

    def __init__(
        self, loader: Optional[Callable[[], EmbeddingModelHandle]] = None
    ) -> None:
        self._cell = _ModelCell(loader or load_sentence_transformer)

    @property
    def is_initialized(self) -> bool:
        return self._cell.resolved

    def initialize(self) -> EmbeddingModelHandle:
        try:
            return self._cell.get()
        except EmbeddingFailure:
            raise
        except Exception as e:
            logger.error("embed.model.load.error err=%s", type(e).__name__)
            raise EmbeddingFailure("embedding model failed to load") from e

    def embed_one(self, text: str) -> np.ndarray:
        handle = self.initialize()
        try:
            vec = handle.encode(text)
        except Exception as e:
            logger.error("embed.encode.error err=%s", type(e).__name__)
            raise EmbeddingFailure("inference failed") from e

        if vec.ndim != 1 or vec.size == 0:
            raise EmbeddingFailure("inference returned an empty vector")
        if not np.all(np.isfinite(vec)):
            raise EmbeddingFailure("inference returned non-finite values")
        if vec.shape[0] != handle.dimension:
            raise EmbeddingFailure(
                f"inference returned {vec.shape[0]} dims, expected {handle.dimension}"
            )
        return vec

    def embed_many(self, texts: Sequence[str]) -> List[np.ndarray]:
        # Same length and order as `texts`; callers zip positionally.
        return [self.embed_one(t) for t in texts]


_default: Optional[EmbeddingService] = None
_default_lock = threading.Lock()


def get_embedding_service() -> EmbeddingService:
    """Process-wide service backed by the configured sentence-transformers model."""
    global _default
    with _default_lock:
        if _default is None:
            _default = EmbeddingService()
        return _default
