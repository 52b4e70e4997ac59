# controller/controller_dependencies.py
import threading
from typing import Optional
from fastapi import File, HTTPException, Request, UploadFile
from config.settings import settings
from core.embedding_service import get_embedding_service
from core.retrieval_engine import RetrievalEngine
from service.document_service import DocumentService

_service: Optional[DocumentService] = None
_service_lock = threading.Lock()


def get_document_service() -> DocumentService:
    # One engine per process: the loaded document lives in memory only.
    global _service
    with _service_lock:
        if _service is None:
            _engine = RetrievalEngine(get_embedding_service())
            _service = DocumentService(_engine)
        return _service


async def enforce_max_upload_size(
    request: Request, file: UploadFile = File(...)
) -> UploadFile:
    # Fast pre-check via Content-Length if present
    max_bytes = settings.MAX_FILE_MB * 1024 * 1024
    detail = {"ok": False, "error": "file_too_large", "maxMb": settings.MAX_FILE_MB}
    cl = request.headers.get("content-length")
    if cl and cl.isdigit() and int(cl) > max_bytes:
        raise HTTPException(status_code=413, detail=detail)

    # Hard cap while reading initial bytes (works even if no Content-Length)
    blob = await file.read(max_bytes + 1)
    if len(blob) > max_bytes:
        raise HTTPException(status_code=413, detail=detail)

    # Reset so downstream can re-read file stream
    await file.seek(0)
    return file
