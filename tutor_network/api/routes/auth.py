"""Auth Routes — signup, login and the current account.

Invariants:
    - Login fails with one message whether the email or the password is wrong
    - Tokens are only issued for persisted accounts
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.api.dependencies import get_current_user
from tutor_network.config import Settings, get_settings
from tutor_network.infrastructure.database import get_db
from tutor_network.infrastructure.security import create_access_token
from tutor_network.models.user import User
from tutor_network.schemas.auth import (
    LoginRequest, SignupRequest, TokenResponse, UserResponse,
)
from tutor_network.services import profiles

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _token_response(user: User, settings: Settings) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, user.user_type, settings),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED,
)
async def signup(
    body: SignupRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = await profiles.register_user(
        db, settings,
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        user_type=body.user_type,
    )
    return _token_response(user, settings)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = await profiles.authenticate(db, body.email, body.password)
    logger.info("User logged in", extra={"user_id": str(user.id)})
    return _token_response(user, settings)


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return user
