from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from config.settings import settings
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer()

ROLE_CANDIDATE = "candidate"
ROLE_INTERVIEWER = "interviewer"

class Identity(BaseModel):
    """Caller identity asserted by the identity provider's token"""
    user_id: str
    role: str = ROLE_CANDIDATE
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_interviewer(self) -> bool:
        return self.role == ROLE_INTERVIEWER

# ============ JWT Token Management ============

def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Production tokens come from the identity provider; this mints
    compatible ones for local development and tests.

    Args:
        data: Claims to encode (typically {"sub": user_id, "role": "interviewer"})
        expires_delta: Optional custom expiration time. If None, uses default from settings

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string to decode

    Returns:
        Decoded token payload (dictionary)

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        return payload
    except JWTError as e:
        logger.error(f"Invalid token: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

# ============ Identity Dependencies ============

async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Identity:
    """
    Dependency resolving the caller from the bearer token.

    Usage in routes:
        @router.get("/mine")
        async def mine(identity: Identity = Depends(get_current_identity)):
            ...
    """
    payload = decode_token(credentials.credentials)

    user_id: str = payload.get("sub")
    if user_id is None:
        logger.warning("Token missing 'sub' claim")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user identifier",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Identity(
        user_id=user_id,
        role=payload.get("role", ROLE_CANDIDATE),
        name=payload.get("name"),
        email=payload.get("email"),
    )

async def require_interviewer(
    identity: Identity = Depends(get_current_identity)
) -> Identity:
    """Dependency rejecting callers without the interviewer role"""
    if not identity.is_interviewer:
        logger.warning(f"Interviewer role required: user={identity.user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Interviewer role required",
        )
    return identity
