# content_api/src/auth/routes.py
from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from .controller import AuthController
from .schema import LoginRequest
from ...config import ContentAPISettings, get_app_settings
from ...database.db import get_database
from ...middlewares.jwt_auth import JWTAuthController
from ...utils.response import send_response

router = APIRouter(prefix="/api", tags=["Authentication"])


def get_auth_controller(
    db: Database = Depends(get_database),
    settings: ContentAPISettings = Depends(get_app_settings),
) -> AuthController:
    return AuthController(db, JWTAuthController(settings))


@router.post("/login")
async def login(
    request: LoginRequest,
    auth_controller: AuthController = Depends(get_auth_controller),
):
    """Exchange email and password for the user record and a signed token"""
    result = await auth_controller.login(request)
    return send_response(status.HTTP_200_OK, result)
