from .hashing import generate_hash, normalize_email
from .codec import PayloadCodec
from .pdf_watermark import PdfWatermarker
from .blob_store import BlobRef, BlobStore, LocalBlobStore
from .store import KeyedStore
from .payload import VerificationPayload

__all__ = [
    'generate_hash', 'normalize_email', 'PayloadCodec', 'PdfWatermarker',
    'BlobRef', 'BlobStore', 'LocalBlobStore', 'KeyedStore', 'VerificationPayload'
]
