# core/entities.py
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple
import numpy as np
from util.errors import DimensionMismatch


@dataclass(frozen=True)
class PassageStub:
    """
    One chunk of a page before embedding.
    Offsets are into the page's cleaned text: 0 <= start < end <= len(text).
    """

    id: str  # f"{page}-{start}"
    page: int  # 1-based page index
    text: str  # trimmed, non-empty
    start: int
    end: int


@dataclass(frozen=True)
class Passage(PassageStub):
    embedding: np.ndarray = field(repr=False, compare=False)  # (d,) float32

    @classmethod
    def from_stub(cls, stub: PassageStub, embedding: np.ndarray) -> "Passage":
        return cls(
            id=stub.id,
            page=stub.page,
            text=stub.text,
            start=stub.start,
            end=stub.end,
            embedding=embedding,
        )


@dataclass(frozen=True)
class PassageIndex:
    """
    Ordered, immutable passages of one document.
    Every embedding shares `dimension`.
    """

    passages: Tuple[Passage, ...] = ()
    dimension: Optional[int] = None

    @classmethod
    def build(cls, passages: Sequence[Passage]) -> "PassageIndex":
        items = tuple(passages)
        if not items:
            return cls()
        dim = int(items[0].embedding.shape[0])
        for p in items[1:]:
            if p.embedding.shape[0] != dim:
                raise DimensionMismatch(dim, int(p.embedding.shape[0]))
        for p in items:
            p.embedding.setflags(write=False)
        return cls(passages=items, dimension=dim)

    def __len__(self) -> int:
        return len(self.passages)

    def __iter__(self) -> Iterator[Passage]:
        return iter(self.passages)

    def __bool__(self) -> bool:
        return bool(self.passages)


@dataclass(frozen=True)
class QueryResult:
    passage: Passage
    score: float  # cosine similarity in [-1, 1]

    @property
    def id(self) -> str:
        return self.passage.id

    @property
    def page(self) -> int:
        return self.passage.page

    @property
    def text(self) -> str:
        return self.passage.text

    @property
    def start(self) -> int:
        return self.passage.start

    @property
    def end(self) -> int:
        return self.passage.end
