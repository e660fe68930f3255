# app/core/security.py
# Bearer token verification; produces the CurrentUser every router depends on
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.repositories.user_repo import UserRepository
from app.schemas.user_schema import CurrentUser, TokenData

logger = logging.getLogger(__name__)

# Token comes from the Authorization header. Tokens are issued elsewhere.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def create_access_token(user_id: str, tenant_id: Optional[str] = None, expires_minutes: Optional[int] = None) -> str:
    """
    Issue a token with the claims get_current_user expects.
    Used by tooling and tests; the login flow lives in another service.
    """
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode = {
        "user_id": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    if tenant_id:
        to_encode["tenant_id"] = tenant_id

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_access_token(token: str) -> Optional[TokenData]:
    """Decode the JWT; None when the token is invalid, expired or lacks user_id"""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None

    user_id = payload.get("user_id")
    if user_id is None:
        return None

    return TokenData(user_id=user_id, tenant_id=payload.get("tenant_id"))


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> CurrentUser:
    """
    FastAPI dependency: verify the token and return {id, tenant_id, role}.

    - the user must exist and be active
    - a tenant claim must point to an active tenant
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token_data = verify_access_token(token)
    if token_data is None:
        raise credentials_exception

    user_repo = UserRepository(db)
    user = await user_repo.get_user_by_id(token_data.user_id)

    if user is None or not user.active:
        logger.info(f"Rejected token for missing or inactive user {token_data.user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )

    tenant_id = token_data.tenant_id or user.tenant_id
    if tenant_id:
        tenant = await user_repo.get_active_tenant(tenant_id)
        if tenant is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Tenant not found or inactive",
                headers={"WWW-Authenticate": "Bearer"},
            )

    return CurrentUser(id=user.id, tenant_id=tenant_id, role=user.role)
