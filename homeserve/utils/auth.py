#homeserve/utils/auth
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
import asyncpg

from ..database import get_db
from ..config import settings
from ..models.auth import AuthContext, TokenData, UserRole

# Tokens are issued by the account service
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

def decode_access_token(token: str) -> TokenData:
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    return TokenData(sub=payload.get("sub"), role=payload.get("role"))

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    conn: asyncpg.Connection = Depends(get_db)
) -> AuthContext:
    """Resolve the bearer token to an active account"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        token_data = decode_access_token(token)
    except (JWTError, ValidationError):
        raise credentials_exception
    if token_data.sub is None or token_data.role is None:
        raise credentials_exception

    user = await conn.fetchrow(
        "SELECT user_id, role, blocked FROM app_user WHERE user_id = $1",
        token_data.sub
    )
    if user is None or user["role"] != token_data.role.value:
        raise credentials_exception
    if user["blocked"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is blocked")

    return AuthContext(user_id=user["user_id"], role=UserRole(user["role"]))

def require_role(*roles: UserRole):
    allowed = {UserRole(role) for role in roles}

    async def check_role(current_user: AuthContext = Depends(get_current_user)) -> AuthContext:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {' or '.join(sorted(r.value for r in allowed))} accounts can do this"
            )
        return current_user

    return check_role

__all__ = [
    "oauth2_scheme",
    "decode_access_token",
    "get_current_user",
    "require_role"
]
