from .certificate_service import CertificateService

__all__ = ['CertificateService']
