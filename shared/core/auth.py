from fastapi import status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from shared.utils.app_status_code import AppStatusCode
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken

security = HTTPBearer()


def verify_token(token: str) -> UserToken:
    """Decode a staff session JWT issued by the auth service."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except ExpiredSignatureError:
        return error_response(
            message="Token has expired",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED,
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    except (JWTError, ValidationError):
        return error_response(
            message="Invalid token",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UserToken:
    return verify_token(credentials.credentials)
