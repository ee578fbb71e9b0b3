"""FastAPI dependency: get_current_principal.

Usage in any protected router:
    from src.lp_gateway.auth.dependencies import Principal, get_current_principal

    @router.get("/protected")
    async def protected(principal: Principal = Depends(get_current_principal)):
        ...

The ledger core trusts the principal; it performs no credential checks itself.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.lp_common.errors import InvalidCredentialsError
from src.lp_gateway.auth.jwt_handler import decode_token

# Tokens come from the external auth service; tokenUrl only feeds Swagger UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class Principal:
    id: str
    role: str


async def get_current_principal(
    token: str = Depends(oauth2_scheme),
) -> Principal:
    """Validate the Bearer token and return the verified principal.

    Raises HTTP 401 if the token is missing, invalid, expired, or has no subject.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    principal_id = payload.get("sub")
    if not principal_id:
        raise _CREDENTIALS_EXCEPTION

    return Principal(id=str(principal_id), role=str(payload.get("role", "staff")))
