import hashlib
from datetime import datetime, timezone


def generate_hash(*parts: str) -> str:
    """
    Concatena las partes (sin separador) y devuelve el SHA-1 en hex.
    Mismas partes en el mismo orden producen siempre el mismo id.
    """
    hash_obj = hashlib.sha1()
    hash_obj.update("".join(parts).encode("utf-8"))
    return hash_obj.hexdigest()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def utc_now() -> datetime:
    """Naive UTC timestamp truncated to milliseconds"""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def to_iso(value: datetime) -> str:
    """Render a naive UTC datetime as 2024-03-01T10:15:30.123Z"""
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def timestamp_ms() -> str:
    return str(int(datetime.now(timezone.utc).timestamp() * 1000))
