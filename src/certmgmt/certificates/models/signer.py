from sqlalchemy import Column, String, DateTime, Boolean
from database import Base


class Signer(Base):
    __tablename__ = 'signers'

    signer_id = Column(String(40), primary_key=True)
    certificate_id = Column(String(40), nullable=False, index=True)
    account_id = Column(String(40), nullable=True)
    name = Column(String, nullable=False)
    email_address = Column(String, nullable=False)
    signed = Column(Boolean, nullable=False, default=False)
    signed_on = Column(DateTime, nullable=True)
