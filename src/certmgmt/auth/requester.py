from dataclasses import dataclass

from certmgmt.accounts.models.account import UserRole


@dataclass(frozen=True)
class Requester:
    """Profile of the authenticated caller, as decoded from its bearer token"""
    account_id: str
    role: UserRole

    @property
    def is_internal(self) -> bool:
        return self.role == UserRole.INTERNAL
