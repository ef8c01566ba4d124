from typing import List

from fastapi import APIRouter, Depends, status

from certmgmt.auth.dependencies import get_current_requester
from certmgmt.auth.requester import Requester
from certmgmt.certificates.schemas.certificate_schemas import (
    AccountIdResponse, CertificateHistory, CommentCreate, CommentCreatedResponse,
    CommentResponse, SignerCreate, SignerResponse
)
from certmgmt.certificates.services.certificate_service import CertificateService
from certmgmt.dependencies import get_certificate_service

router = APIRouter(
    tags=["certificates"]
)


@router.post(
    "/{certificate_id}/signers",
    response_model=AccountIdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar un firmante"
)
def add_signer(
    certificate_id: str,
    signer: SignerCreate,
    requester: Requester = Depends(get_current_requester),
    service: CertificateService = Depends(get_certificate_service)
):
    account_id = service.enroll_signer(requester, certificate_id, signer)
    return AccountIdResponse(account_id=account_id)


@router.post(
    "/{certificate_id}/signers/admin",
    response_model=AccountIdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar al emisor como firmante"
)
def add_admin_signer(
    certificate_id: str,
    requester: Requester = Depends(get_current_requester),
    service: CertificateService = Depends(get_certificate_service)
):
    return AccountIdResponse(account_id=service.add_admin_signer(requester, certificate_id))


@router.get("/{certificate_id}/signers", response_model=List[SignerResponse])
def list_signers(
    certificate_id: str,
    requester: Requester = Depends(get_current_requester),
    service: CertificateService = Depends(get_certificate_service)
):
    return service.get_signers(requester, certificate_id)


@router.post("/{certificate_id}/sign")
def sign_certificate(
    certificate_id: str,
    requester: Requester = Depends(get_current_requester),
    service: CertificateService = Depends(get_certificate_service)
):
    service.sign_certificate(requester, certificate_id)
    return {"message": "Firma añadida"}


@router.post(
    "/{certificate_id}/comments",
    response_model=CommentCreatedResponse,
    status_code=status.HTTP_201_CREATED
)
def add_comment(
    certificate_id: str,
    payload: CommentCreate,
    requester: Requester = Depends(get_current_requester),
    service: CertificateService = Depends(get_certificate_service)
):
    comment_id = service.add_comment(requester, certificate_id, payload.comment)
    return CommentCreatedResponse(comment_id=comment_id)


@router.get("/{certificate_id}/comments", response_model=List[CommentResponse])
def list_comments(
    certificate_id: str,
    requester: Requester = Depends(get_current_requester),
    service: CertificateService = Depends(get_certificate_service)
):
    return service.list_comments(requester, certificate_id)


@router.get("/{certificate_id}/history", response_model=CertificateHistory)
def get_history(
    certificate_id: str,
    requester: Requester = Depends(get_current_requester),
    service: CertificateService = Depends(get_certificate_service)
):
    return service.get_history(requester, certificate_id)
