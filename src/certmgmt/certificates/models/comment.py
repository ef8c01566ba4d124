from sqlalchemy import Column, String, DateTime, Text
from database import Base


class Comment(Base):
    __tablename__ = 'comments'

    comment_id = Column(String(40), primary_key=True)
    certificate_id = Column(String(40), nullable=False, index=True)
    account_id = Column(String(40), nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False)
