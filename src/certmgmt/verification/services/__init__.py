from .verification_service import VerificationService

__all__ = ['VerificationService']
