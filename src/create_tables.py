# create_tables.py
import logging

from database import engine, Base
# Importa todos los modelos para que se registren con Base
from certmgmt.accounts.models.account import Account
from certmgmt.certificates.models.certificate import Certificate
from certmgmt.certificates.models.comment import Comment
from certmgmt.certificates.models.signer import Signer
from certmgmt.documents.models.document import Document
from certmgmt.documents.models.permission import AccessPermission

logger = logging.getLogger(__name__)


def create_tables(bind=engine):
    """Crea todas las tablas en la base de datos"""
    logger.info("Tablas a crear: %s", list(Base.metadata.tables.keys()))
    Base.metadata.create_all(bind=bind)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
