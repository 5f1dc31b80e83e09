"""
Security Utility
----------------
Handles:
- JWT token creation and verification
- Caller identity extraction (the `sub` claim of a bearer token)

How identities are issued and authenticated upstream is out of scope; the
ledger only needs one stable identity string per request.
"""

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from underwriting.config import config
from underwriting.utils.logger import logger

# =========================================================
# 🔐 JWT Setup
# =========================================================
security = HTTPBearer(auto_error=False)


def create_jwt_token(data: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """
    Create a signed JWT token with expiry.
    Example payload: {"sub": "alice"}
    """
    minutes = config.JWT_EXPIRY_MINUTES if expires_minutes is None else expires_minutes
    expire_time = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {**data, "exp": expire_time, "type": "access"}
    token = jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
    logger.debug(f"JWT created for {data.get('sub', 'unknown')}")
    return token


def verify_jwt_token(token: str) -> Dict[str, Any]:
    """Verify JWT and return decoded payload; raise 401 when invalid."""
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("JWT token expired")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except InvalidTokenError:
        logger.warning("Invalid JWT token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def get_caller_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Identity of the current request, taken from the bearer token's `sub` claim."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_jwt_token(credentials.credentials)
    identity = payload.get("sub")
    if not identity:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return str(identity)


# =========================================================
# 🧪 Local Test
# =========================================================
if __name__ == "__main__":
    token = create_jwt_token({"sub": "user123"})
    print("JWT Token:", token)
    print("Decoded:", verify_jwt_token(token))
