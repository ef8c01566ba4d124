from .document import Document, DocumentStatus
from .permission import AccessLevel, AccessPermission

__all__ = ['Document', 'DocumentStatus', 'AccessLevel', 'AccessPermission']
