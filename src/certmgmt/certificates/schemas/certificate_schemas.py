from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class SignerCreate(BaseModel):
    name: str = Field(min_length=1)
    email_address: EmailStr
    account_id: Optional[str] = None


class SignerResponse(BaseModel):
    account_id: Optional[str] = None
    name: str
    email_address: str
    signed: bool
    signed_on: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AccountIdResponse(BaseModel):
    account_id: str


class CommentCreate(BaseModel):
    comment: str = Field(min_length=1)


class CommentResponse(BaseModel):
    comment_id: str
    account_id: str
    comment: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CommentCreatedResponse(BaseModel):
    comment_id: str


class SignedSigner(BaseModel):
    name: str
    email: str
    signed_on: Optional[datetime] = None


class Transaction(BaseModel):
    transaction_id: str
    title: str
    description: str


class CertificateHistory(BaseModel):
    signers: List[SignedSigner]
    transactions: List[Transaction]
