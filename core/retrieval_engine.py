# core/retrieval_engine.py
import threading
from typing import Callable, Iterable, List, Optional, Tuple
from config.settings import settings
from core.chunker import chunk_page
from core.embedding_service import EmbeddingService
from core.entities import Passage, PassageIndex, QueryResult
from core.vector import cosine_similarity
from util.enums import EngineState
from util.errors import (
    DimensionMismatch,
    DocumentLoadFailure,
    EmbeddingFailure,
    LoadSuperseded,
    QueryFailure,
)
from util.timing import timed
import logging

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class RetrievalEngine:
    """
    Holds the passage index of one document and answers questions against it.

    EMPTY -> LOADING -> READY, READY -> LOADING on a new document,
    READY -> QUERYING -> READY per question. Every load takes a generation
    token; a load whose token is no longer the latest is abandoned and never
    committed.
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        *,
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
    ) -> None:
        self._embeddings = embeddings
        self._chunk_size = settings.CHUNK_SIZE if chunk_size is None else chunk_size
        self._overlap = settings.CHUNK_OVERLAP if overlap is None else overlap
        self._lock = threading.Lock()
        self._generation = 0
        self._active_queries = 0
        self._index: Optional[PassageIndex] = None
        self._state = EngineState.EMPTY

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def index(self) -> Optional[PassageIndex]:
        return self._index

    # ---------------- Loading ----------------

    def load_document(
        self,
        pages: Iterable[Tuple[int, str]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> PassageIndex:
        """
        Chunk and embed `pages` in order, one page batch at a time.
        Raises DocumentLoadFailure if any page fails to embed, and
        LoadSuperseded if a newer load started meanwhile.
        """
        pages = list(pages)
        with self._lock:
            self._generation += 1
            token = self._generation
            self._index = None
            self._state = EngineState.LOADING
        total = len(pages)
        logger.info("load.start gen=%d pages=%d", token, total)

        built: List[Passage] = []
        try:
            with timed(logger, "load.document", gen=token, pages=total):
                for done, (page_number, page_text) in enumerate(pages, start=1):
                    self._ensure_current(token)
                    stubs = chunk_page(
                        page_text, page_number, self._chunk_size, self._overlap
                    )
                    if stubs:
                        vectors = self._embeddings.embed_many([s.text for s in stubs])
                        built.extend(
                            Passage.from_stub(s, v) for s, v in zip(stubs, vectors)
                        )
                    if on_progress is not None:
                        on_progress(done / total)
                index = PassageIndex.build(built)
        except LoadSuperseded:
            raise
        except (EmbeddingFailure, DimensionMismatch) as e:
            self._abandon(token)
            raise DocumentLoadFailure(f"document load failed: {e}") from e
        except Exception:
            self._abandon(token)
            raise

        with self._lock:
            if token != self._generation:
                logger.info("load.superseded gen=%d latest=%d", token, self._generation)
                raise LoadSuperseded(f"load {token} superseded by {self._generation}")
            self._index = index
            self._state = EngineState.READY
        logger.info(
            "load.ok gen=%d passages=%d dim=%s", token, len(index), index.dimension
        )
        return index

    def _ensure_current(self, token: int) -> None:
        if token != self._generation:
            logger.info("load.superseded gen=%d latest=%d", token, self._generation)
            raise LoadSuperseded(f"load {token} superseded by {self._generation}")

    def _abandon(self, token: int) -> None:
        with self._lock:
            if token == self._generation:
                self._index = None
                self._state = EngineState.EMPTY
        logger.error("load.error gen=%d", token)

    # ---------------- Querying ----------------

    def query(
        self,
        question: str,
        index: Optional[PassageIndex] = None,
        top_k: Optional[int] = None,
    ) -> List[QueryResult]:
        """
        Rank every passage of `index` (default: the loaded one) by cosine
        similarity to `question`. Ties keep index order. An empty index, a
        blank question or top_k <= 0 yield [].
        """
        k = settings.TOP_K if top_k is None else top_k
        target = self._index if index is None else index
        text = (question or "").strip()
        if not target or not text or k <= 0:
            return []

        with self._lock:
            tracked = target is self._index and self._state in (
                EngineState.READY,
                EngineState.QUERYING,
            )
            if tracked:
                self._active_queries += 1
                self._state = EngineState.QUERYING

        try:
            with timed(logger, "query", passages=len(target), k=k):
                try:
                    q = self._embeddings.embed_one(text)
                except EmbeddingFailure as e:
                    raise QueryFailure("question could not be embedded") from e
                scored = [
                    QueryResult(passage=p, score=cosine_similarity(q, p.embedding))
                    for p in target
                ]
        finally:
            if tracked:
                with self._lock:
                    self._active_queries -= 1
                    if self._active_queries == 0 and self._state == EngineState.QUERYING:
                        self._state = EngineState.READY

        # list.sort is stable, reverse=True included
        scored.sort(key=lambda r: r.score, reverse=True)
        return scored[:k]
