"""API Dependencies - FastAPI providers for clients, dispatchers and the principal.

Invariants:
    - The authenticated Account is passed explicitly to services (no global context)
    - A missing, malformed or expired access token -> FILTER_ACCESS_DENIED
    - Every provider is a plain function so tests swap it via dependency_overrides
"""

from fastapi import BackgroundTasks, Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from plub.config import get_settings
from plub.core.notification import PushDispatcher
from plub.core.pagination import clamp_size
from plub.infrastructure.database import get_db
from plub.infrastructure.jwt_provider import JwtProvider
from plub.infrastructure.push_client import BackgroundPushDispatcher, PushClient
from plub.infrastructure.social_client import SocialClient
from plub.models.account import Account
from plub.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_jwt_provider() -> JwtProvider:
    return JwtProvider.from_settings(get_settings())


def get_social_client() -> SocialClient:
    return SocialClient.from_settings(get_settings())


def get_push_client() -> PushClient:
    return PushClient.from_settings(get_settings())


def get_dispatcher(
    background_tasks: BackgroundTasks,
    client: PushClient = Depends(get_push_client),
) -> PushDispatcher:
    """Pushes are sent after the response has gone out."""
    return BackgroundPushDispatcher(background_tasks, client)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    return credentials.credentials if credentials else None


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    jwt_provider: JwtProvider = Depends(get_jwt_provider),
    social_client: SocialClient = Depends(get_social_client),
) -> AuthService:
    return AuthService(db, jwt_provider, social_client)


async def get_current_account(
    token: str | None = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> Account:
    return await auth.resolve_principal(token)


def get_page_size(size: int | None = Query(None, ge=1)) -> int:
    """`size` query parameter, defaulted and capped."""
    return clamp_size(size, get_settings().default_page_size)
