# service/document_service.py
import asyncio
import time
import logging
from fastapi import UploadFile
from config.settings import settings
from core.pdf_text import extract_pages_texts, render_page_png
from core.retrieval_engine import RetrievalEngine
from model.api import (
    LoadDocumentResponse,
    PassageHit,
    ProgressPayload,
    ProgressPhase,
    QueryResponse,
    StatusResponse,
)
from util.enums import ErrorMessage
from util.errors import AppError, DocumentLoadFailure, LoadSuperseded, QueryFailure
from util.functions import highlight_keywords

logger = logging.getLogger(__name__)


def _fail(err: ErrorMessage) -> AppError:
    return AppError(err.value.message, err.value.http_status)


class DocumentService:
    """
    Async facade over one RetrievalEngine: the currently loaded PDF, its name
    and load progress live here, in memory only.
    """

    def __init__(
        self, engine: RetrievalEngine, preview_zoom: float = settings.PREVIEW_ZOOM
    ) -> None:
        self._engine = engine
        self._zoom = preview_zoom
        self._pdf: bytes | None = None
        self._file_name: str | None = None
        self._progress: ProgressPayload | None = None
        self._uploads = 0

    def _set_progress(self, phase: ProgressPhase, processed: float) -> None:
        self._progress = ProgressPayload(
            phase=phase, processed=processed, ts=int(time.time())
        )

    async def load_pdf(self, file: UploadFile) -> LoadDocumentResponse:
        """
        Extract, chunk and embed an uploaded PDF, replacing any previous one.
        Logs: sizes and counts only (no payloads).
        """
        self._uploads += 1
        upload = self._uploads

        try:
            data = await file.read()
            await file.seek(0)
        except Exception:
            logger.error("upload.read.error")
            raise

        self._set_progress("extract", 0.0)
        pages = await asyncio.to_thread(extract_pages_texts, data)
        if not any(txt for _, txt in pages):
            logger.warning("upload.no_text bytes=%d pages=%d", len(data), len(pages))
            self._progress = None
            raise _fail(ErrorMessage.NO_TEXT)
        if upload != self._uploads:
            logger.info("upload.superseded upload=%d latest=%d", upload, self._uploads)
            raise _fail(ErrorMessage.LOAD_SUPERSEDED)

        def on_progress(fraction: float) -> None:
            if upload == self._uploads:
                self._set_progress("index", fraction)

        self._pdf = None
        self._file_name = None
        self._set_progress("index", 0.0)
        try:
            index = await asyncio.to_thread(
                self._engine.load_document, pages, on_progress
            )
        except LoadSuperseded:
            raise _fail(ErrorMessage.LOAD_SUPERSEDED)
        except DocumentLoadFailure:
            logger.error("upload.index.error bytes=%d pages=%d", len(data), len(pages))
            if upload == self._uploads:
                self._progress = None
            raise _fail(ErrorMessage.LOAD_FAILED)

        if self._engine.index is not index:
            raise _fail(ErrorMessage.LOAD_SUPERSEDED)
        self._pdf = data
        self._file_name = file.filename
        logger.info(
            "upload.ok bytes=%d pages=%d passages=%d", len(data), len(pages), len(index)
        )
        return LoadDocumentResponse(
            fileName=file.filename,
            pages=len(pages),
            passages=len(index),
            dimension=index.dimension,
        )

    async def ask(self, question: str, top_k: int) -> QueryResponse:
        try:
            results = await asyncio.to_thread(self._engine.query, question, None, top_k)
        except QueryFailure:
            logger.error("query.error k=%d", top_k)
            raise _fail(ErrorMessage.QUERY_FAILED)

        logger.info("query.ok k=%d hits=%d", top_k, len(results))
        return QueryResponse(
            results=[PassageHit.from_result(r) for r in results],
            keywords=highlight_keywords(question),
        )

    async def preview(self, page: int) -> bytes:
        pdf = self._pdf
        if pdf is None or self._engine.index is None:
            raise _fail(ErrorMessage.NO_DOCUMENT)
        try:
            return await asyncio.to_thread(render_page_png, pdf, page, self._zoom)
        except ValueError:
            raise _fail(ErrorMessage.PAGE_NOT_FOUND)

    def status(self) -> StatusResponse:
        index = self._engine.index
        return StatusResponse(
            state=self._engine.state,
            fileName=self._file_name,
            passages=len(index) if index is not None else 0,
            progress=self._progress,
        )
