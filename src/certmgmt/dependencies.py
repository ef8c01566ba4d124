from fastapi import Depends, Request
from sqlalchemy.orm import Session

from certmgmt.certificates.services.certificate_service import CertificateService
from certmgmt.common.blob_store import BlobStore
from certmgmt.common.pdf_watermark import PdfWatermarker
from certmgmt.documents.services.document_service import DocumentService
from certmgmt.documents.services.permission_service import PermissionService
from certmgmt.verification.services.verification_service import VerificationService
from database import get_db

# Collaborators are built once in the application lifespan and kept on app.state


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_watermarker(request: Request) -> PdfWatermarker:
    return request.app.state.watermarker


def get_document_service(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    watermarker: PdfWatermarker = Depends(get_watermarker)
) -> DocumentService:
    return DocumentService(db, blob_store, watermarker)


def get_permission_service(db: Session = Depends(get_db)) -> PermissionService:
    return PermissionService(db)


def get_certificate_service(db: Session = Depends(get_db)) -> CertificateService:
    return CertificateService(db)


def get_verification_service(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    watermarker: PdfWatermarker = Depends(get_watermarker)
) -> VerificationService:
    return VerificationService(db, blob_store, watermarker)
