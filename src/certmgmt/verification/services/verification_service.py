import base64
import binascii
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from certmgmt.common.blob_store import BlobStore
from certmgmt.common.payload import VerificationPayload
from certmgmt.common.pdf_watermark import PdfWatermarker
from certmgmt.common.store import KeyedStore
from certmgmt.documents.models.document import Document
from certmgmt.errors import ServiceError, ValidationError
from certmgmt.verification.schemas.verification_schemas import (
    DocumentClaims, FileVerificationRequest, VerificationRequest,
    VerificationResult, VerifiedCertificate
)

logger = logging.getLogger(__name__)


def _as_count(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class VerificationService:
    """
    Checks the watermark embedded when a document was certified.
    A failed check is an answer (is_valid=False), never an error.
    """

    def __init__(self, db_session: Session, blob_store: BlobStore, watermarker: PdfWatermarker):
        self.documents = KeyedStore(db_session, Document)
        self.blob_store = blob_store
        self.watermarker = watermarker

    def verify_document(self, request: VerificationRequest) -> VerificationResult:
        try:
            if isinstance(request, FileVerificationRequest):
                return self._verify_file(request)
            return self._verify_claims(request)
        except ServiceError as e:
            logger.warning("Verification failed: %s", e.message)
            return VerificationResult(is_valid=False)
        except (OSError, SQLAlchemyError) as e:
            logger.warning("Verification failed while reading the stored document: %s", e)
            return VerificationResult(is_valid=False)

    def _verify_file(self, request: FileVerificationRequest) -> VerificationResult:
        try:
            pdf_bytes = base64.b64decode(request.file_content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("File content is not valid base64") from e

        self._read_payload(pdf_bytes)
        return VerificationResult(is_valid=True)

    def _verify_claims(self, claims: DocumentClaims) -> VerificationResult:
        document = self.documents.find_by_id(claims.document_id)
        payload = self._read_payload(self.blob_store.get(document.blob_key))

        is_valid = (
            payload.owner_id == claims.owner_id
            and payload.document_id == claims.document_id
            and payload.created_at == claims.created_at
            and payload.signers_count == _as_count(claims.amount_of_signers)
        )
        logger.info("Verification of document %s: %s", claims.document_id, is_valid)
        if not is_valid:
            return VerificationResult(is_valid=False)

        return VerificationResult(
            is_valid=True,
            certificate=VerifiedCertificate(
                document_id=document.document_id,
                owner_id=document.owner_id,
                name=document.name,
                status=document.status
            )
        )

    def _read_payload(self, pdf_bytes: bytes) -> VerificationPayload:
        tag = self.watermarker.extract_verification_tag(pdf_bytes)
        return VerificationPayload.parse(self.watermarker.codec.decrypt(tag))
