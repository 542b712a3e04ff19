import asyncio
import hmac
import logging
from typing import Any, Dict

from fastapi import HTTPException, status
from passlib.context import CryptContext
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .schema import LoginRequest, LoginResult
from ...middlewares.jwt_auth import JWTAuthController
from ...utils.helperFunctions import serialize_document

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, stored_password: str) -> bool:
    """Check a password against a stored bcrypt hash.

    Records written before hashing was introduced hold the password as-is;
    those are compared in constant time instead.
    """
    if not stored_password:
        return False
    if pwd_context.identify(stored_password) is None:
        return hmac.compare_digest(plain_password.encode(), stored_password.encode())
    return pwd_context.verify(plain_password, stored_password)


class AuthController:
    """Email/password login for the site administrator"""

    def __init__(self, db: Database, jwt_auth: JWTAuthController):
        self.db = db
        self.jwt_auth = jwt_auth

    async def login(self, request: LoginRequest) -> Dict[str, Any]:
        try:
            user = await asyncio.to_thread(self.db.users.find_one, {"email": request.email})
        except PyMongoError as e:
            logger.error(f"❌ User lookup failed: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email address"
            )

        if not verify_password(request.password, user.get("password", "")):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid password"
            )

        token, expires_at = self.jwt_auth.create_access_token(str(user["_id"]), user["email"])
        user.pop("password", None)
        logger.info(f"🔑 Login succeeded for {user['email']}")

        return LoginResult(
            user=serialize_document(user),
            token=token,
            expires_at=expires_at,
        ).model_dump()
