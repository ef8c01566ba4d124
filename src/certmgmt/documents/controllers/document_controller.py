from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from starlette.concurrency import run_in_threadpool

from certmgmt.auth.dependencies import get_current_requester
from certmgmt.auth.requester import Requester
from certmgmt.dependencies import get_document_service, get_permission_service
from certmgmt.documents.models.permission import AccessLevel
from certmgmt.documents.schemas.document_schemas import (
    DocumentCreatedResponse, DocumentInitial, DocumentListResponse,
    PermissionCreate, PermissionResponse
)
from certmgmt.documents.services.document_service import DocumentService
from certmgmt.documents.services.permission_service import PermissionService
from settings import Settings, get_settings

router = APIRouter(
    tags=["documents"]
)


def _require_owner_or_internal(requester: Requester, owner_id: str):
    if not requester.is_internal and requester.account_id != owner_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "You don't have permission to access this resource.")


def _validate_upload(file: UploadFile, contents: bytes, max_file_size: int):
    if file.content_type != "application/pdf":
        raise HTTPException(400, "El archivo debe ser un PDF")
    if not file.filename or not file.filename.lower().endswith(".pdf"):
        raise HTTPException(400, "La extensión debe ser .pdf")
    if len(contents) > max_file_size:
        raise HTTPException(400, f"El tamaño máximo es {max_file_size // (1024 * 1024)} MB")


@router.post("/{owner_id}", response_model=DocumentCreatedResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    owner_id: str,
    name: str = Form(..., min_length=1),
    folder_name: str = Form("Food"),
    signers_count: int = Form(1, ge=1),
    requested_at: Optional[datetime] = Form(None),
    valid_until: Optional[datetime] = Form(None),
    file: UploadFile = File(...),
    requester: Requester = Depends(get_current_requester),
    service: DocumentService = Depends(get_document_service),
    settings: Settings = Depends(get_settings)
):
    _require_owner_or_internal(requester, owner_id)
    contents = await file.read()
    _validate_upload(file, contents, settings.max_file_size)

    document = DocumentInitial(
        name=name,
        folder_name=folder_name,
        signers_count=signers_count,
        requested_at=requested_at,
        valid_until=valid_until
    )
    document_id = await run_in_threadpool(service.new_document, owner_id, document, contents)
    return DocumentCreatedResponse(document_id=document_id)


@router.get("/{owner_id}", response_model=DocumentListResponse)
def list_documents(
    owner_id: str,
    filter: Optional[str] = None,
    sort: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    requester: Requester = Depends(get_current_requester),
    service: DocumentService = Depends(get_document_service)
):
    _require_owner_or_internal(requester, owner_id)
    documents = service.get_documents(owner_id, filter, sort, limit, offset)
    return DocumentListResponse(
        documents=documents,
        total=service.count_documents(owner_id, filter)
    )


@router.get("/{owner_id}/{document_id}/content")
def download_document(
    owner_id: str,
    document_id: str,
    requester: Requester = Depends(get_current_requester),
    service: DocumentService = Depends(get_document_service)
):
    data = service.get_document(requester, owner_id, document_id)
    return Response(content=data, media_type="application/pdf")


@router.delete("/{owner_id}/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_document(
    owner_id: str,
    document_id: str,
    requester: Requester = Depends(get_current_requester),
    service: DocumentService = Depends(get_document_service)
):
    service.revoke_document(requester, owner_id, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/permissions", response_model=List[PermissionResponse])
def list_permissions(
    document_id: str,
    requester: Requester = Depends(get_current_requester),
    permissions: PermissionService = Depends(get_permission_service)
):
    if not requester.is_internal and not permissions.has_access(
        document_id, requester.account_id, [AccessLevel.OWNER]
    ):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Your account does not own this document.")
    return permissions.list_grants(document_id)


@router.post("/{document_id}/permissions", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
def grant_permission(
    document_id: str,
    payload: PermissionCreate,
    requester: Requester = Depends(get_current_requester),
    permissions: PermissionService = Depends(get_permission_service)
):
    if not requester.is_internal and not permissions.has_access(
        document_id, requester.account_id, [AccessLevel.OWNER]
    ):
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Your account does not own this document.")
    permission_id = permissions.grant(document_id, payload.account_id, payload.access_level)
    return permissions.permissions.find_by_id(permission_id)
