from .document_schemas import (
    DocumentInitial, DocumentResponse, DocumentCreatedResponse,
    DocumentListResponse, PermissionCreate, PermissionResponse
)

__all__ = [
    'DocumentInitial', 'DocumentResponse', 'DocumentCreatedResponse',
    'DocumentListResponse', 'PermissionCreate', 'PermissionResponse'
]
