from .certificate import Certificate, CertificateCategory
from .comment import Comment
from .signer import Signer

__all__ = ['Certificate', 'CertificateCategory', 'Comment', 'Signer']
