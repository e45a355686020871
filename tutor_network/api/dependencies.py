"""API Dependencies — settings, the authenticated user, role guards and the LLM client.

Invariants:
    - get_current_user raises AuthenticationError (401) for a missing, invalid or
      expired token and for a token whose user no longer exists
    - require_tutor / require_student raise PermissionDeniedError (403)
    - get_llm_client returns None when no API key is configured

Design Decisions:
    - One LLM client per process (lru_cache), shared by all requests
"""

import logging
from functools import lru_cache

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_network.config import Settings, get_settings
from tutor_network.core.domain_types import UserType
from tutor_network.core.errors import AuthenticationError, PermissionDeniedError
from tutor_network.infrastructure.anthropic_client import ResilientAnthropicClient
from tutor_network.infrastructure.database import get_db
from tutor_network.infrastructure.security import decode_access_token
from tutor_network.models.user import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    if not token:
        raise AuthenticationError("Not authenticated")
    user_id = decode_access_token(token, settings)
    user = (await db.execute(
        select(User).where(User.id == user_id),
    )).scalar_one_or_none()
    if user is None:
        raise AuthenticationError("Account no longer exists")
    return user


async def require_tutor(user: User = Depends(get_current_user)) -> User:
    if user.user_type != UserType.TUTOR.value:
        raise PermissionDeniedError("This action is only available to tutors")
    return user


async def require_student(user: User = Depends(get_current_user)) -> User:
    if user.user_type != UserType.STUDENT.value:
        raise PermissionDeniedError("This action is only available to students")
    return user


@lru_cache
def _build_llm_client(
    api_key: str, max_retries: int, base_delay_ms: int, max_delay_ms: int,
    timeout_seconds: int,
) -> ResilientAnthropicClient:
    return ResilientAnthropicClient(
        api_key=api_key,
        max_retries=max_retries,
        base_delay_ms=base_delay_ms,
        max_delay_ms=max_delay_ms,
        timeout_seconds=timeout_seconds,
    )


def get_llm_client(
    settings: Settings = Depends(get_settings),
) -> ResilientAnthropicClient | None:
    api_key = (settings.anthropic_api_key or "").strip()
    if not api_key:
        return None
    return _build_llm_client(
        api_key,
        settings.anthropic_max_retries,
        settings.anthropic_base_delay_ms,
        settings.anthropic_max_delay_ms,
        settings.anthropic_timeout_seconds,
    )
