from __future__ import annotations

from http.cookies import CookieError, SimpleCookie
from typing import Annotated

from fastapi import Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jetfund.config import settings
from jetfund.database import get_db
from jetfund.exceptions import NotAuthenticatedError
from jetfund.models.profile import UserAccount
from jetfund.repositories.project_repository import ProjectRepository
from jetfund.repositories.session_repository import SessionRepository
from jetfund.repositories.user_repository import UserRepository
from jetfund.services.auth_service import AuthService, auth_service
from jetfund.services.earnings_service import EarningsService
from jetfund.services.hackatime_service import HackatimeService
from jetfund.services.project_service import ProjectService
from jetfund.services.session_service import SessionService
from jetfund.services.upload_service import UploadService
from jetfund.services.user_service import UserService

AsyncDBSession = Annotated[AsyncSession, Depends(get_db)]


TOKEN_COOKIE_KEYS = (
    "jetfund.session_token",
    "authjs.session-token",
    "__Secure-authjs.session-token",
    "session_token",
)


def _extract_token_from_request(
    authorization: str | None = None,
    cookie: str | None = None,
    token_param: str | None = None,
) -> str | None:
    """Extract JWT token from Authorization header, cookie, or query parameter."""

    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    if token_param:
        return token_param

    if not cookie:
        return None

    try:
        jar = SimpleCookie()
        jar.load(cookie)
        cookies = {name: morsel.value for name, morsel in jar.items()}
    except CookieError:
        return None

    for key in TOKEN_COOKIE_KEYS:
        if key in cookies:
            return cookies[key]

    return None


def get_auth_service() -> AuthService:
    return auth_service


async def get_current_user(
    request: Request,
    db: AsyncDBSession,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    authorization: Annotated[str | None, Header()] = None,
    token: Annotated[str | None, Query()] = None,
) -> UserAccount:
    """Dependency to get current authenticated user from bearer token,
    cookie, or query parameter."""

    token_value = _extract_token_from_request(
        authorization=authorization,
        cookie=request.headers.get("cookie", ""),
        token_param=token,
    )

    if not token_value:
        raise NotAuthenticatedError("Not authenticated.")

    return await auth.get_user_from_token(token_value, db)


CurrentUser = Annotated[UserAccount, Depends(get_current_user)]


def get_project_repository(db: AsyncDBSession) -> ProjectRepository:
    return ProjectRepository(db)


def get_session_repository(db: AsyncDBSession) -> SessionRepository:
    return SessionRepository(db)


def get_user_repository(db: AsyncDBSession) -> UserRepository:
    return UserRepository(db)


ProjectRepositoryDep = Annotated[ProjectRepository, Depends(get_project_repository)]
SessionRepositoryDep = Annotated[SessionRepository, Depends(get_session_repository)]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]


def get_hackatime_service() -> HackatimeService:
    return HackatimeService(settings.hackatime_base_url, timeout=settings.http_timeout_seconds)


def get_upload_service() -> UploadService:
    return UploadService(
        bucky_url=settings.bucky_url,
        cdn_url=settings.cdn_url,
        cdn_token=settings.cdn_token,
        timeout=settings.http_timeout_seconds,
    )


HackatimeServiceDep = Annotated[HackatimeService, Depends(get_hackatime_service)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]


def get_session_service(
    sessions: SessionRepositoryDep,
    projects: ProjectRepositoryDep,
) -> SessionService:
    return SessionService(sessions=sessions, projects=projects)


def get_project_service(
    projects: ProjectRepositoryDep,
    sessions: SessionRepositoryDep,
    users: UserRepositoryDep,
    hackatime: HackatimeServiceDep,
) -> ProjectService:
    return ProjectService(
        projects=projects,
        sessions=sessions,
        users=users,
        hackatime=hackatime,
        allow_reopen=settings.allow_project_reopen,
    )


def get_earnings_service(
    projects: ProjectRepositoryDep,
    users: UserRepositoryDep,
) -> EarningsService:
    return EarningsService(projects=projects, users=users, rate=settings.earnings_rate)


def get_user_service(users: UserRepositoryDep) -> UserService:
    return UserService(users=users)


SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
EarningsServiceDep = Annotated[EarningsService, Depends(get_earnings_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
