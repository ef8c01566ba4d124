from sqlalchemy import Column, String, Enum, DateTime, Boolean
from enum import Enum as PyEnum
from datetime import datetime
from database import Base


class UserRole(str, PyEnum):
    INTERNAL = "internal"
    ADMIN = "admin"
    USER = "user"
    SIGNER = "signer"
    VERIFIER = "verifier"


class Account(Base):
    __tablename__ = 'accounts'

    account_id = Column(String(40), primary_key=True)
    organization_id = Column(String(40), nullable=True)
    name = Column(String, nullable=False)
    email_address = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    job_position = Column(String, nullable=False)
    user_role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e]), nullable=False)

    active = Column(Boolean, default=True, nullable=False)
    verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
