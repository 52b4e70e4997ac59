import pytest
from fastapi.testclient import TestClient

from conftest import BagOfWordsEncoder, service_for
from config.settings import settings
from controller.controller_dependencies import get_document_service
from core.retrieval_engine import RetrievalEngine
from main import app
from service.document_service import DocumentService
from test_pdf_text import make_pdf
from test_retrieval_engine import FailingOn
from util.constants import InternalURIs

PDF = make_pdf("The capital of France is Paris.", "Rome is the capital of Italy.")


def _client(encoder) -> TestClient:
    engine = RetrievalEngine(service_for(encoder, encoder.dim))
    service = DocumentService(engine)
    app.dependency_overrides[get_document_service] = lambda: service
    return TestClient(app)


@pytest.fixture
def client():
    yield _client(BagOfWordsEncoder())
    app.dependency_overrides.clear()


def _upload(client, data=PDF, name="atlas.pdf"):
    return client.post(
        InternalURIs.DOCUMENTS, files={"file": (name, data, "application/pdf")}
    )


def test_healthz(client):
    res = client.get(InternalURIs.HEALTH)
    assert res.status_code == 200
    assert res.json()["ok"] is True


def test_upload_then_query(client):
    res = _upload(client)
    assert res.status_code == 201
    assert res.json() == {"fileName": "atlas.pdf", "pages": 2, "passages": 2, "dimension": 64}

    res = client.post(
        InternalURIs.QUERY, json={"question": "What is the capital of France?", "topK": 5}
    )
    assert res.status_code == 200
    body = res.json()
    assert [r["page"] for r in body["results"]] == [1, 2]
    assert body["results"][0]["score"] > body["results"][1]["score"]
    assert body["results"][0]["id"] == "1-0"
    assert body["results"][0]["start"] == 0
    assert body["results"][0]["end"] == len("The capital of France is Paris.")
    assert body["keywords"] == ["what", "the", "capital", "france?"]


def test_status_reflects_loaded_document(client):
    assert client.get(InternalURIs.STATUS).json()["state"] == "empty"

    _upload(client)
    body = client.get(InternalURIs.STATUS).json()

    assert body["state"] == "ready"
    assert body["fileName"] == "atlas.pdf"
    assert body["passages"] == 2
    assert body["progress"]["phase"] == "index"
    assert body["progress"]["processed"] == 1.0


def test_query_without_document_is_empty(client):
    res = client.post(InternalURIs.QUERY, json={"question": "anything"})
    assert res.status_code == 200
    assert res.json()["results"] == []


def test_query_rejects_bad_top_k(client):
    res = client.post(InternalURIs.QUERY, json={"question": "q", "topK": 0})
    assert res.status_code == 422


def test_page_preview(client):
    _upload(client)

    res = client.get(InternalURIs.PAGE_PREVIEW.format(page=1))
    assert res.status_code == 200
    assert res.headers["content-type"] == "image/png"
    assert res.content.startswith(b"\x89PNG")

    assert client.get(InternalURIs.PAGE_PREVIEW.format(page=9)).status_code == 404
    assert client.get(InternalURIs.PAGE_PREVIEW.format(page=0)).status_code == 422


def test_preview_without_document(client):
    assert client.get(InternalURIs.PAGE_PREVIEW.format(page=1)).status_code == 404


def test_upload_without_text_is_unprocessable(client):
    res = _upload(client, data=b"not a pdf at all", name="junk.pdf")
    assert res.status_code == 422


def test_upload_too_large(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_MB", 0)
    res = _upload(client)
    assert res.status_code == 413
    assert res.json()["detail"]["error"] == "file_too_large"


def test_index_failure_is_bad_gateway():
    client = _client(FailingOn("Rome"))
    try:
        res = _upload(client)
        assert res.status_code == 502
        assert client.get(InternalURIs.STATUS).json()["state"] == "empty"
    finally:
        app.dependency_overrides.clear()


def test_query_failure_is_unavailable():
    client = _client(FailingOn("boom"))
    try:
        assert _upload(client).status_code == 201
        res = client.post(InternalURIs.QUERY, json={"question": "boom"})
        assert res.status_code == 503
        res = client.post(InternalURIs.QUERY, json={"question": "Paris"})
        assert res.json()["results"][0]["page"] == 1
    finally:
        app.dependency_overrides.clear()
