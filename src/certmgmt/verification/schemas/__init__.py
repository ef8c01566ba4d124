from .verification_schemas import (
    DocumentClaims, FileVerificationRequest, VerificationRequest,
    VerifiedCertificate, VerificationResult
)

__all__ = [
    'DocumentClaims', 'FileVerificationRequest', 'VerificationRequest',
    'VerifiedCertificate', 'VerificationResult'
]
