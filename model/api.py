# model/api.py
from pydantic import BaseModel, Field
from typing import Literal
from config.settings import settings
from core.entities import QueryResult
from util.enums import EngineState


class LoadDocumentResponse(BaseModel):
    fileName: str | None = None
    pages: int
    passages: int
    dimension: int | None = None


class QueryRequest(BaseModel):
    question: str = Field(min_length=1)
    topK: int = Field(default=settings.TOP_K, ge=1, le=50)


class PassageHit(BaseModel):
    id: str
    page: int
    text: str
    start: int
    end: int
    score: float

    @classmethod
    def from_result(cls, r: QueryResult) -> "PassageHit":
        return cls(
            id=r.id, page=r.page, text=r.text, start=r.start, end=r.end, score=r.score
        )


class QueryResponse(BaseModel):
    results: list[PassageHit]
    keywords: list[str]


ProgressPhase = Literal["extract", "index"]


class ProgressPayload(BaseModel):
    phase: ProgressPhase
    processed: float = Field(ge=0.0, le=1.0)
    ts: int


class StatusResponse(BaseModel):
    state: EngineState
    fileName: str | None = None
    passages: int = 0
    progress: ProgressPayload | None = None
