from datetime import datetime, timedelta, timezone
from typing import Tuple

from fastapi import HTTPException, status
from jose import jwt, JWTError

from ..config import ContentAPISettings
from ..src.auth.schema import TokenClaims


class JWTAuthController:
    """Issues and verifies the bearer tokens handed out at login"""

    def __init__(self, settings: ContentAPISettings):
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_days = settings.JWT_TOKEN_EXPIRE_DAYS

    def create_access_token(self, user_id: str, email: str) -> Tuple[str, datetime]:
        """Sign a token for the user; returns it with its expiry"""
        issued_at = datetime.now(timezone.utc)
        expire = issued_at + timedelta(days=self.expire_days)
        claims = {
            "sub": user_id,
            "email": email,
            "iat": issued_at,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm), expire

    def decode_access_token(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
            )
        return TokenClaims(**payload)
