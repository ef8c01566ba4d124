import base64

import pytest

from certmgmt.common.codec import PayloadCodec
from certmgmt.common.hashing import to_iso
from certmgmt.common.pdf_watermark import PdfWatermarker
from certmgmt.documents.models.document import Document, DocumentStatus
from certmgmt.documents.schemas.document_schemas import DocumentInitial
from certmgmt.documents.services.document_service import DocumentService
from certmgmt.verification.schemas.verification_schemas import (
    DocumentClaims, FileVerificationRequest
)
from certmgmt.verification.services.verification_service import VerificationService
from conftest import create_dummy_pdf_bytes


@pytest.fixture
def certified(session, blob_store, watermarker, example_pdf):
    documents = DocumentService(session, blob_store, watermarker)
    document_id = documents.new_document("o1", DocumentInitial(name="cert", signers_count=1), example_pdf)
    return session.get(Document, document_id)


@pytest.fixture
def service(session, blob_store, watermarker):
    return VerificationService(session, blob_store, watermarker)


def claims_for(document, **overrides):
    fields = {
        "owner_id": document.owner_id,
        "document_id": document.document_id,
        "created_at": to_iso(document.created_at),
        "amount_of_signers": 1,
    }
    fields.update(overrides)
    return DocumentClaims(**fields)


def test_matching_claims_are_valid(service, certified):
    result = service.verify_document(claims_for(certified))
    assert result.is_valid is True
    assert result.certificate.document_id == certified.document_id
    assert result.certificate.status == DocumentStatus.SIGNED


@pytest.mark.parametrize("field, value", [
    ("owner_id", "o2"),
    ("created_at", "2020-01-01T00:00:00.000Z"),
    ("amount_of_signers", 2),
])
def test_single_mismatch_is_invalid(service, certified, field, value):
    result = service.verify_document(claims_for(certified, **{field: value}))
    assert result.is_valid is False
    assert result.certificate is None


def test_unknown_document_is_invalid(service, certified):
    assert service.verify_document(claims_for(certified, document_id="missing")).is_valid is False


def test_claims_accept_camel_case_and_string_counts(service, certified):
    claims = DocumentClaims.model_validate({
        "ownerId": certified.owner_id,
        "documentId": certified.document_id,
        "createdAt": to_iso(certified.created_at),
        "amountOfSigners": "1",
    })
    assert service.verify_document(claims).is_valid is True


def test_amount_of_signers_defaults_to_one(service, certified):
    claims = DocumentClaims.model_validate({
        "ownerId": certified.owner_id,
        "documentId": certified.document_id,
        "createdAt": to_iso(certified.created_at),
    })
    assert service.verify_document(claims).is_valid is True


def test_missing_blob_is_invalid(service, certified, blob_store):
    blob_store.delete(certified.blob_key)
    assert service.verify_document(claims_for(certified)).is_valid is False


def test_watermarked_file_is_valid(service, certified, blob_store):
    content = base64.b64encode(blob_store.get(certified.blob_key)).decode("ascii")
    result = service.verify_document(FileVerificationRequest(file_content=content))
    assert result.is_valid is True


def test_unwatermarked_file_is_invalid(service):
    content = base64.b64encode(create_dummy_pdf_bytes()).decode("ascii")
    assert service.verify_document(FileVerificationRequest(file_content=content)).is_valid is False


def test_file_that_is_not_base64_is_invalid(service):
    assert service.verify_document(FileVerificationRequest(file_content="%%% no base64 %%%")).is_valid is False


def test_file_watermarked_with_other_secret_is_invalid(service, example_pdf):
    foreign = PdfWatermarker(PayloadCodec("other-secret")).embed(example_pdf, "o1||d||t||1")
    content = base64.b64encode(foreign).decode("ascii")
    assert service.verify_document(FileVerificationRequest(file_content=content)).is_valid is False


def test_malformed_payload_is_invalid(service, watermarker, example_pdf):
    tampered = watermarker.embed(example_pdf, "only-one-field")
    content = base64.b64encode(tampered).decode("ascii")
    assert service.verify_document(FileVerificationRequest(file_content=content)).is_valid is False


def test_owner_with_delimiter_in_id_verifies(session, service, blob_store, watermarker, example_pdf):
    documents = DocumentService(session, blob_store, watermarker)
    document_id = documents.new_document("a||b", DocumentInitial(name="cert"), example_pdf)
    document = session.get(Document, document_id)

    result = service.verify_document(claims_for(document))
    assert result.is_valid is True
    assert result.certificate.owner_id == "a||b"


def test_unreadable_blob_is_invalid(service, certified, blob_store, monkeypatch):
    def broken_get(key):
        raise PermissionError(f"cannot read {key}")

    monkeypatch.setattr(blob_store, "get", broken_get)
    assert service.verify_document(claims_for(certified)).is_valid is False


@pytest.mark.parametrize("amount", [0, "abc", "", "1.5"])
def test_amount_that_is_not_the_count_is_invalid(service, certified, amount):
    assert service.verify_document(claims_for(certified, amount_of_signers=amount)).is_valid is False
