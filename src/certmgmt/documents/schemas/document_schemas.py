from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from certmgmt.common.hashing import to_iso
from certmgmt.documents.models.document import DocumentStatus
from certmgmt.documents.models.permission import AccessLevel


class DocumentInitial(BaseModel):
    name: str = Field(min_length=1)
    folder_name: str = "Food"
    requested_at: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    signers_count: int = Field(default=1, ge=1)


class DocumentResponse(BaseModel):
    document_id: str
    owner_id: str
    name: str
    folder_name: str
    status: DocumentStatus
    requested_at: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    created_at: datetime
    # Vista previa en base64; vacía para documentos revocados
    file_content: Optional[str] = None

    model_config = {"from_attributes": True}

    # Mismo formato que el createdAt embebido en la marca de agua
    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso(value)


class DocumentCreatedResponse(BaseModel):
    document_id: str


class DocumentListResponse(BaseModel):
    documents: List[DocumentResponse]
    total: int


class PermissionCreate(BaseModel):
    account_id: str
    access_level: AccessLevel


class PermissionResponse(BaseModel):
    permission_id: str
    document_id: str
    account_id: str
    access_level: AccessLevel
    created_at: datetime

    model_config = {"from_attributes": True}
