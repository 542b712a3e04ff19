from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


# ----- Request Models -----
class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()


# ----- Token Models -----
class TokenClaims(BaseModel):
    sub: str
    email: str
    iat: datetime
    exp: datetime


class LoginResult(BaseModel):
    user: dict
    token: str
    expires_at: Optional[datetime] = None
