from __future__ import annotations

import asyncio
import logging
from typing import Any

import jwt
from jwt import PyJWKClient
from jwt.exceptions import ExpiredSignatureError, PyJWTError
from sqlalchemy.ext.asyncio import AsyncSession

from jetfund.config import settings
from jetfund.exceptions import NotAuthenticatedError
from jetfund.models.profile import UserAccount
from jetfund.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Verifies identity-provider tokens and maps them onto internal users."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        jwks_url: str | None = None,
        issuer: str | None = None,
        audience: str | None = None,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.jwks_client = (
            PyJWKClient(
                jwks_url,
                cache_keys=True,
                max_cached_keys=16,
                lifespan=300,  # Cache for 5 minutes
            )
            if jwks_url
            else None
        )

    async def verify_token(self, token: str) -> dict[str, Any]:
        """Verify JWT token and return payload."""
        return await asyncio.to_thread(self._verify_token_sync, token)

    def _verify_token_sync(self, token: str) -> dict[str, Any]:
        try:
            if self.jwks_client is not None:
                key: Any = self.jwks_client.get_signing_key_from_jwt(token).key
                algorithms = ["EdDSA", "RS256", "ES256"]
            else:
                key = self.secret_key
                algorithms = [self.algorithm]
            return jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None, "require": ["sub"]},
            )
        except ExpiredSignatureError as exc:
            raise NotAuthenticatedError("Token has expired") from exc
        except PyJWTError as exc:
            raise NotAuthenticatedError(f"Invalid token: {exc}") from exc

    @staticmethod
    def is_token_revoked(user: UserAccount, payload: dict[str, Any]) -> bool:
        """True when the user invalidated their sessions after this token was issued."""
        if user.sessions_invalidated_at is None:
            return False
        issued_at = payload.get("iat")
        if issued_at is None:
            return True
        # `iat` has whole-second resolution; a token from the invalidation second stays valid.
        return int(user.sessions_invalidated_at.timestamp()) > int(issued_at)

    async def get_user_from_token(self, token: str, db: AsyncSession) -> UserAccount:
        """Get user from token, creating user if not exists."""
        payload = await self.verify_token(token)

        slack_id = payload.get("sub")
        if not slack_id:
            raise NotAuthenticatedError("Token missing user ID")

        user = await UserRepository(db).get_or_create_by_slack_id(
            slack_id,
            name=payload.get("name"),
            email=payload.get("email"),
        )

        if self.is_token_revoked(user, payload):
            logger.info("Rejected token issued before session invalidation", extra={"user_id": user.id})
            raise NotAuthenticatedError("Session has been invalidated. Please sign in again.")

        return user


auth_service = AuthService(
    secret_key=settings.auth_secret,
    algorithm=settings.auth_algorithm,
    jwks_url=settings.auth_jwks_url,
    issuer=settings.auth_issuer,
    audience=settings.auth_audience,
)
