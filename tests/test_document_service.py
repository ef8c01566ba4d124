import base64
from datetime import datetime

import pytest

from certmgmt.accounts.models.account import UserRole
from certmgmt.common.hashing import generate_hash, to_iso
from certmgmt.common.payload import VerificationPayload
from certmgmt.documents.models.document import Document, DocumentStatus
from certmgmt.documents.models.permission import AccessLevel, AccessPermission
from certmgmt.documents.schemas.document_schemas import DocumentInitial
from certmgmt.documents.services.document_service import (
    DocumentService, document_blob_key, preview_blob_key
)
from certmgmt.errors import (
    ConflictError, DocumentFormatError, ForbiddenError, NotFoundError, ValidationError
)
from conftest import create_dummy_pdf_bytes, requester


@pytest.fixture
def service(session, blob_store, watermarker):
    return DocumentService(session, blob_store, watermarker)


def create_legacy_document(session, document_id, owner_id, status=DocumentStatus.SIGNED, name="old"):
    document = Document(
        document_id=document_id,
        owner_id=owner_id,
        name=name,
        folder_name="Food",
        status=status,
        requested_at=datetime(2023, 1, 1),
        blob_key=f"documents/{owner_id}/{name}.pdf",
        signers_count=1,
        created_at=datetime(2023, 1, 1)
    )
    session.add(document)
    session.commit()
    return document


def test_create_single_signer_document(session, service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert", signers_count=1), example_pdf)

    assert document_id == generate_hash("o1")
    document = session.get(Document, document_id)
    assert document.status == DocumentStatus.SIGNED
    assert document.owner_id == "o1"
    assert document.blob_key == document_blob_key("o1", "cert")

    grants = session.query(AccessPermission).filter_by(document_id=document_id).all()
    assert len(grants) == 1
    assert grants[0].account_id == "o1"
    assert grants[0].access_level == AccessLevel.OWNER


def test_create_multi_signer_document_is_sent(session, service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert", signers_count=3), example_pdf)
    assert session.get(Document, document_id).status == DocumentStatus.SENT


def test_uploaded_blob_carries_the_watermark(session, service, blob_store, watermarker, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert", signers_count=2), example_pdf)
    document = session.get(Document, document_id)

    stored = blob_store.get(document.blob_key)
    assert stored != example_pdf
    payload = VerificationPayload.parse(
        watermarker.codec.decrypt(watermarker.extract_verification_tag(stored))
    )
    assert payload == VerificationPayload("o1", document_id, to_iso(document.created_at), 2)


def test_second_upload_for_same_owner_conflicts(service, example_pdf):
    service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    other_content = create_dummy_pdf_bytes(text="otro contenido")
    with pytest.raises(ConflictError):
        service.new_document("o1", DocumentInitial(name="cert-2"), other_content)


def test_missing_file_content_is_rejected(session, service):
    with pytest.raises(ValidationError):
        service.new_document("o1", DocumentInitial(name="cert"), b"")
    assert session.query(Document).count() == 0


def test_invalid_pdf_creates_nothing(session, service, blob_store):
    with pytest.raises(DocumentFormatError):
        service.new_document("o1", DocumentInitial(name="cert"), b"not a pdf")
    assert session.query(Document).count() == 0
    assert session.query(AccessPermission).count() == 0
    with pytest.raises(NotFoundError):
        blob_store.get(document_blob_key("o1", "cert"))


def test_new_document_supersedes_previous_ones(session, service, example_pdf):
    create_legacy_document(session, "legacy-1", "o1", DocumentStatus.SIGNED)
    create_legacy_document(session, "legacy-2", "o1", DocumentStatus.SENT, name="older")
    create_legacy_document(session, "other-owner", "o2", DocumentStatus.SIGNED)

    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    session.expire_all()

    assert session.get(Document, "legacy-1").status == DocumentStatus.REVOKED
    assert session.get(Document, "legacy-2").status == DocumentStatus.REVOKED
    assert session.get(Document, "other-owner").status == DocumentStatus.SIGNED
    assert session.get(Document, document_id).status == DocumentStatus.SIGNED

    current = session.query(Document).filter(
        Document.owner_id == "o1", Document.status != DocumentStatus.REVOKED
    ).all()
    assert [d.document_id for d in current] == [document_id]


def test_owner_can_download_document(service, blob_store, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    content = service.get_document(requester("o1"), "o1", document_id)
    assert content.startswith(b"%PDF")


def test_download_without_owner_grant_is_forbidden(service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    with pytest.raises(ForbiddenError):
        service.get_document(requester("intruder"), "o1", document_id)


def test_viewer_grant_is_not_enough_to_download(service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    service.permissions.grant(document_id, "o2", AccessLevel.VIEWER)
    with pytest.raises(ForbiddenError):
        service.get_document(requester("o2"), "o1", document_id)


def test_granting_owner_allows_download(service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    service.permissions.grant(document_id, "o2", AccessLevel.OWNER)
    assert service.get_document(requester("o2"), "o1", document_id).startswith(b"%PDF")


def test_revoke_document(session, service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    service.revoke_document(requester("o1"), "o1", document_id)
    session.expire_all()
    assert session.get(Document, document_id).status == DocumentStatus.REVOKED


def test_revoke_twice_is_not_found(service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    service.revoke_document(requester("o1"), "o1", document_id)
    with pytest.raises(NotFoundError):
        service.revoke_document(requester("o1"), "o1", document_id)


def test_revoke_with_wrong_owner_is_not_found(service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    with pytest.raises(NotFoundError):
        service.revoke_document(requester("admin", UserRole.INTERNAL), "o2", document_id)


def test_revoke_by_stranger_is_forbidden(service, example_pdf):
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    with pytest.raises(ForbiddenError):
        service.revoke_document(requester("o2"), "o1", document_id)


def test_list_documents_with_preview(session, service, blob_store, example_pdf):
    create_legacy_document(session, "legacy-1", "o1", name="old")
    blob_store.put(b"old-jpeg", preview_blob_key("o1", "old"), "image/jpeg")
    blob_store.put(b"jpeg-bytes", preview_blob_key("o1", "cert"), "image/jpeg")
    document_id = service.new_document("o1", DocumentInitial(name="cert"), example_pdf)

    documents = {d.document_id: d for d in service.get_documents("o1")}

    assert documents[document_id].file_content == base64.b64encode(b"jpeg-bytes").decode("ascii")
    assert documents["legacy-1"].status == DocumentStatus.REVOKED
    assert documents["legacy-1"].file_content is None


def test_missing_preview_is_none(service, example_pdf):
    service.new_document("o1", DocumentInitial(name="cert"), example_pdf)
    [document] = service.get_documents("o1")
    assert document.file_content is None


def test_list_documents_filter_sort_and_paging(session, service):
    for index in range(5):
        create_legacy_document(session, f"doc-{index}", "o1", name=f"name-{index}")
    create_legacy_document(session, "inv-1", "o1", DocumentStatus.SENT, name="Invoice")
    create_legacy_document(session, "foreign", "o2", name="name-x")

    assert len(service.get_documents("o1")) == 6
    assert [d.document_id for d in service.get_documents("o1", filter="status:eq:sent")] == ["inv-1"]
    assert [d.name for d in service.get_documents("o1", filter="name:like:inv")] == ["Invoice"]

    page = service.get_documents("o1", filter="name:like:name", sort="desc:name", limit=2, offset=1)
    assert [d.name for d in page] == ["name-3", "name-2"]
    assert service.count_documents("o1", filter="name:like:name") == 5


def test_documents_from_account(session, service):
    create_legacy_document(session, "doc-a", "acc-1")
    create_legacy_document(session, "doc-b", "acc-2")
    assert [d.document_id for d in service.get_documents_from_account("acc-1")] == ["doc-a"]
