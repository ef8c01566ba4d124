import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from certmgmt.errors import CodecError


def _derive_key(secret: str) -> bytes:
    # Fernet needs 32 url-safe base64 encoded bytes; any secret string is accepted
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class PayloadCodec:
    """Symmetric encryption of the verification payload embedded in PDFs."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("The payload secret must not be empty")
        self._fernet = Fernet(_derive_key(secret))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        """
        Decrypts a token produced by encrypt().
        Any token produced with a different secret, or tampered with, raises CodecError.
        """
        try:
            return self._fernet.decrypt(token.encode("utf-8")).decode("utf-8")
        except (InvalidToken, UnicodeError, AttributeError) as e:
            raise CodecError("Verification payload could not be decrypted") from e
