import base64
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from certmgmt.auth.requester import Requester
from certmgmt.common.blob_store import BlobStore
from certmgmt.common.filters import create_order_clause, create_where_clause
from certmgmt.common.hashing import generate_hash, to_iso, utc_now
from certmgmt.common.payload import VerificationPayload
from certmgmt.common.pdf_watermark import PdfWatermarker
from certmgmt.common.store import KeyedStore
from certmgmt.documents.models.document import Document, DocumentStatus
from certmgmt.documents.models.permission import AccessLevel
from certmgmt.documents.schemas.document_schemas import DocumentInitial, DocumentResponse
from certmgmt.documents.services.permission_service import PermissionService
from certmgmt.errors import (
    ConflictError, ForbiddenError, NotFoundError, ValidationError
)

logger = logging.getLogger(__name__)


def document_blob_key(owner_id: str, name: str) -> str:
    return f"documents/{owner_id}/{name}.pdf"


def preview_blob_key(owner_id: str, name: str) -> str:
    return f"documents/{owner_id}/{name}.jpg"


class DocumentService:
    """
    Lifecycle of the certified document of an owner.

    An owner has at most one current document: creating a new one revokes
    every other document of the same owner. Status goes sent -> signed, and
    either state can end in revoked.
    """

    def __init__(self, db_session: Session, blob_store: BlobStore, watermarker: PdfWatermarker):
        self.documents = KeyedStore(db_session, Document)
        self.permissions = PermissionService(db_session)
        self.blob_store = blob_store
        self.watermarker = watermarker

    def new_document(self, owner_id: str, document: DocumentInitial, file_content: bytes) -> str:
        """
        Crea el documento certificado del propietario:
        - Deriva el id a partir del owner_id
        - Inserta la marca de agua (metadatos + QR)
        - Sube el PDF resultante al blob store
        - Registra el documento y el permiso de propietario
        - Revoca los documentos anteriores del mismo propietario
        """
        created_at = utc_now()
        document_id = generate_hash(owner_id)

        if self.documents.exists(document_id):
            raise ConflictError(
                "There is already a document in our system for the given request."
            )

        if not file_content:
            raise ValidationError(
                "The required file content of the document is missing in the request."
            )

        payload = VerificationPayload(
            owner_id=owner_id,
            document_id=document_id,
            created_at=to_iso(created_at),
            signers_count=document.signers_count
        )
        watermarked = self.watermarker.embed(file_content, payload.serialize())

        blob = self.blob_store.put(
            watermarked, document_blob_key(owner_id, document.name), "application/pdf"
        )

        self.documents.create(Document(
            document_id=document_id,
            owner_id=owner_id,
            name=document.name,
            folder_name=document.folder_name,
            status=DocumentStatus.SIGNED if document.signers_count == 1 else DocumentStatus.SENT,
            requested_at=document.requested_at or created_at,
            valid_until=document.valid_until,
            blob_key=blob.key,
            blob_location=blob.location,
            signers_count=document.signers_count,
            created_at=created_at
        ))

        self.permissions.grant(document_id, owner_id, AccessLevel.OWNER)

        # Supersession: only after the new row exists
        superseded = self.documents.update_all(
            {"status": DocumentStatus.REVOKED},
            Document.owner_id == owner_id,
            Document.document_id != document_id,
            Document.status != DocumentStatus.REVOKED
        )
        logger.info(
            "Document %s created for owner %s (%d previous revoked)",
            document_id, owner_id, superseded
        )
        return document_id

    def get_document(self, requester: Requester, owner_id: str, document_id: str) -> bytes:
        """Returns the watermarked PDF; requires an owner grant for the requester"""
        if not self.permissions.has_access(document_id, requester.account_id, [AccessLevel.OWNER]):
            raise ForbiddenError("Your account does not own this certificate.")

        document = self.documents.find_by_id(document_id)
        if document.owner_id != owner_id:
            raise NotFoundError(f"Document {document_id} not found")

        return self.blob_store.get(document.blob_key)

    def get_documents(
        self,
        owner_id: str,
        filter: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[DocumentResponse]:
        documents = self.documents.find(
            Document.owner_id == owner_id,
            *create_where_clause(Document, filter),
            order_by=create_order_clause(Document, sort),
            limit=limit,
            offset=offset
        )
        return [self._to_response(document) for document in documents]

    def count_documents(self, owner_id: str, filter: Optional[str] = None) -> int:
        return self.documents.count(
            Document.owner_id == owner_id,
            *create_where_clause(Document, filter)
        )

    def get_documents_from_account(self, account_id: str) -> List[DocumentResponse]:
        return self.get_documents(account_id)

    def revoke_document(self, requester: Requester, owner_id: str, document_id: str) -> None:
        if not requester.is_internal and requester.account_id != owner_id:
            raise ForbiddenError("You don't have permission to access this resource.")

        updated = self.documents.update_all(
            {"status": DocumentStatus.REVOKED},
            Document.document_id == document_id,
            Document.owner_id == owner_id,
            Document.status != DocumentStatus.REVOKED
        )
        if updated == 0:
            raise NotFoundError("No document found to revoke.")

        logger.info("Document %s of owner %s revoked", document_id, owner_id)

    def _to_response(self, document: Document) -> DocumentResponse:
        response = DocumentResponse.model_validate(document)
        if document.status != DocumentStatus.REVOKED:
            response.file_content = self._get_preview(document)
        return response

    def _get_preview(self, document: Document) -> Optional[str]:
        try:
            image = self.blob_store.get(preview_blob_key(document.owner_id, document.name))
        except NotFoundError:
            logger.debug("No preview for document %s", document.document_id)
            return None
        return base64.b64encode(image).decode("ascii")
