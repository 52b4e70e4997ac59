# controller/document_controller.py
from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from fastapi.responses import Response
from controller.controller_dependencies import (
    enforce_max_upload_size,
    get_document_service,
)
from model.api import LoadDocumentResponse, QueryRequest, QueryResponse, StatusResponse
from service.document_service import DocumentService
from util.constants import PNG_MEDIA_TYPE, InternalURIs

document_router = APIRouter()


@document_router.post(
    InternalURIs.DOCUMENTS,
    response_model=LoadDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def upload_document(
    file: UploadFile = File(...),
    service: DocumentService = Depends(get_document_service),
) -> LoadDocumentResponse:
    return await service.load_pdf(file)


@document_router.post(InternalURIs.QUERY, response_model=QueryResponse)
async def query_document(
    payload: QueryRequest,
    service: DocumentService = Depends(get_document_service),
) -> QueryResponse:
    return await service.ask(payload.question, payload.topK)


@document_router.get(InternalURIs.STATUS, response_model=StatusResponse)
async def document_status(
    service: DocumentService = Depends(get_document_service),
) -> StatusResponse:
    return service.status()


@document_router.get(InternalURIs.PAGE_PREVIEW)
async def page_preview(
    page: int = Path(..., ge=1),
    service: DocumentService = Depends(get_document_service),
) -> Response:
    png = await service.preview(page)
    return Response(content=png, media_type=PNG_MEDIA_TYPE)
