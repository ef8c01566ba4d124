from sqlalchemy import Column, Integer, String, DateTime, Enum
from enum import Enum as PyEnum
from database import Base


class DocumentStatus(str, PyEnum):
    SENT = "sent"
    SIGNED = "signed"
    REVOKED = "revoked"


class Document(Base):
    __tablename__ = 'documents'

    document_id = Column(String(40), primary_key=True)
    owner_id = Column(String(40), nullable=False, index=True)
    name = Column(String, nullable=False)
    folder_name = Column(String, nullable=False)
    status = Column(
        Enum(DocumentStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DocumentStatus.SENT
    )
    requested_at = Column(DateTime, nullable=False)
    valid_until = Column(DateTime, nullable=True)

    # Ubicación del PDF con marca de agua en el blob store
    blob_key = Column(String, nullable=False)
    blob_location = Column(String, nullable=True)

    signers_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False)
