class ServiceError(Exception):
    """Base class for errors surfaced by the certificate services"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or malformed input"""
    status_code = 400


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """An entity with the same content-addressed id already exists"""
    status_code = 409


class DuplicateGrantError(ConflictError):
    pass


class DocumentFormatError(ServiceError):
    """The supplied bytes are not a readable PDF"""
    status_code = 422


class CodecError(ServiceError):
    """Verification payload could not be decrypted"""
    status_code = 422
