import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from certmgmt.common.hashing import generate_hash, utc_now
from certmgmt.common.store import KeyedStore
from certmgmt.documents.models.permission import AccessLevel, AccessPermission
from certmgmt.errors import ConflictError, DuplicateGrantError

logger = logging.getLogger(__name__)


class PermissionService:
    """
    Ledger of access rights on documents. Rights are only ever added:
    changing someone's access means granting an extra row.
    """

    def __init__(self, db_session: Session):
        self.permissions = KeyedStore(db_session, AccessPermission)

    def grant(self, document_id: str, account_id: str, level: AccessLevel) -> str:
        level = AccessLevel(level)
        permission_id = generate_hash(account_id, document_id, level.value)

        if self.permissions.exists(permission_id):
            raise DuplicateGrantError(
                "There is already an access permission for the given data."
            )

        try:
            self.permissions.create(AccessPermission(
                permission_id=permission_id,
                document_id=document_id,
                account_id=account_id,
                access_level=level,
                created_at=utc_now()
            ))
        except ConflictError as e:
            raise DuplicateGrantError(e.message) from e

        logger.info("Granted %s on document %s to %s", level.value, document_id, account_id)
        return permission_id

    def list_grants(self, document_id: str) -> List[AccessPermission]:
        return self.permissions.find(
            AccessPermission.document_id == document_id,
            order_by=[AccessPermission.created_at.asc()]
        )

    def has_access(self, document_id: str, account_id: str, levels: Iterable[AccessLevel]) -> bool:
        allowed = {AccessLevel(level) for level in levels}
        return any(
            grant.account_id == account_id and grant.access_level in allowed
            for grant in self.list_grants(document_id)
        )
