"""JWT verification for tokens issued by the external auth service.

This service never issues tokens. HS256 with a shared JWT_SECRET; the auth
service puts the member-facing principal in the claims:
    {"sub": "<principal id>", "role": "<role>", "type": "access", "exp": ...}
"""

from jose import JWTError, jwt

from config.settings import settings
from src.lp_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def decode_token(token: str, expected_type: str = "access") -> dict[str, str]:
    """Decode and validate a JWT token.

    Args:
        token: Raw JWT string.
        expected_type: Required value of the "type" claim. Strictly enforced to
                       prevent refresh tokens being used as access tokens.

    Returns:
        Decoded payload dict with at minimum {"sub": ..., "type": ...}.

    Raises:
        InvalidCredentialsError: Token invalid, expired, or of the wrong type.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != expected_type:
        raise InvalidCredentialsError()

    return payload
