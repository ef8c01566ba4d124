from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from certmgmt.accounts.models.account import UserRole
from certmgmt.auth.requester import Requester
from settings import Settings, get_settings

security = HTTPBearer()


def decode_requester(token: str, settings: Settings) -> Optional[Requester]:
    """Verifica el token JWT y retorna el perfil del solicitante"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    account_id = payload.get("accountId") or payload.get("sub")
    if not account_id:
        return None
    try:
        role = UserRole(payload.get("role", UserRole.USER.value))
    except ValueError:
        return None
    return Requester(account_id=account_id, role=role)


def get_current_requester(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    settings: Settings = Depends(get_settings)
) -> Requester:
    """Dependency para obtener el solicitante autenticado"""
    requester = decode_requester(credentials.credentials, settings)
    if requester is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return requester
