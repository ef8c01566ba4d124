from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from certmgmt.documents.models.document import DocumentStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class DocumentClaims(_CamelModel):
    """Claims checked against the watermark of the stored document"""
    owner_id: str
    document_id: str
    created_at: str
    # Compared as an integer; values that are not a count never match
    amount_of_signers: Union[int, str] = 1


class FileVerificationRequest(_CamelModel):
    """Base64 encoded PDF whose watermark is decoded directly"""
    file_content: str


VerificationRequest = Union[DocumentClaims, FileVerificationRequest]


class VerifiedCertificate(_CamelModel):
    document_id: str
    owner_id: str
    name: str
    status: DocumentStatus


class VerificationResult(_CamelModel):
    is_valid: bool
    certificate: Optional[VerifiedCertificate] = None
