from .certificate_schemas import (
    SignerCreate, SignerResponse, AccountIdResponse, CommentCreate,
    CommentResponse, CommentCreatedResponse, SignedSigner, Transaction,
    CertificateHistory
)

__all__ = [
    'SignerCreate', 'SignerResponse', 'AccountIdResponse', 'CommentCreate',
    'CommentResponse', 'CommentCreatedResponse', 'SignedSigner', 'Transaction',
    'CertificateHistory'
]
