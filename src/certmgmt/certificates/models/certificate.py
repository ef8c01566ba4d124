from sqlalchemy import Column, String, Enum, DateTime
from enum import Enum as PyEnum
from database import Base


class CertificateCategory(str, PyEnum):
    FOOD = "Food"
    PRODUCT_TESTING = "Product Testing"
    OTHER = "Other"


class Certificate(Base):
    """Certificates are issued by the account service; this service only reads them."""
    __tablename__ = 'certificates'

    certificate_id = Column(String(40), primary_key=True)
    issuer_id = Column(String(40), nullable=False)
    issuer_name = Column(String, nullable=True)
    owner_id = Column(String(40), nullable=False, index=True)
    owner_name = Column(String, nullable=True)
    requester_id = Column(String(40), nullable=False)
    requester_name = Column(String, nullable=True)
    sample_id = Column(String, nullable=False)
    lot_number = Column(String, nullable=True)
    product = Column(String, nullable=False)
    category = Column(
        Enum(CertificateCategory, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=CertificateCategory.FOOD
    )
    created_at = Column(DateTime, nullable=False)
