from .permission_service import PermissionService
from .document_service import DocumentService

__all__ = ['PermissionService', 'DocumentService']
