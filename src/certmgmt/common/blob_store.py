import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from certmgmt.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobRef:
    key: str
    location: str


class BlobStore(Protocol):
    """Path-keyed object storage used for certified PDFs and their previews."""

    def put(self, data: bytes, key: str, content_type: str) -> BlobRef: ...

    def get(self, key: str) -> bytes: ...

    def delete(self, key: str) -> None: ...


class LocalBlobStore:
    """Blob store backed by a directory; keys map to relative file paths."""

    def __init__(self, root_dir: str):
        self.root = Path(root_dir).resolve()

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise ValidationError(f"Invalid blob key: {key}")
        return path

    def put(self, data: bytes, key: str, content_type: str) -> BlobRef:
        path = self._path(key)
        os.makedirs(path.parent, exist_ok=True)
        # Re-uploading the same key overwrites; keys are deterministic
        with open(path, "wb") as f:
            f.write(data)
        logger.debug("Stored blob %s (%s, %d bytes)", key, content_type, len(data))
        return BlobRef(key=key, location=path.as_uri())

    def get(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise NotFoundError(f"Blob not found: {key}")
        with open(path, "rb") as f:
            return f.read()

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            os.remove(path)
