from sqlalchemy import Column, String, DateTime, Enum
from enum import Enum as PyEnum
from database import Base


class AccessLevel(str, PyEnum):
    OWNER = "owner"
    VIEWER = "viewer"
    PARTNER = "partner"


class AccessPermission(Base):
    """Append-only: rows are never updated or deleted"""
    __tablename__ = 'document_access_permissions'

    permission_id = Column(String(40), primary_key=True)
    document_id = Column(String(40), nullable=False, index=True)
    account_id = Column(String(40), nullable=False)
    access_level = Column(
        Enum(AccessLevel, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    created_at = Column(DateTime, nullable=False)
