from fastapi import APIRouter, Depends

from certmgmt.dependencies import get_verification_service
from certmgmt.verification.schemas.verification_schemas import (
    VerificationRequest, VerificationResult
)
from certmgmt.verification.services.verification_service import VerificationService

router = APIRouter(
    tags=["verification"]
)


@router.post("", response_model=VerificationResult, response_model_exclude_none=True)
def verify_document(
    request: VerificationRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verifica la marca de agua de un documento certificado.
    Acepta los datos del documento o el PDF en base64; no requiere autenticación.
    """
    return service.verify_document(request)
