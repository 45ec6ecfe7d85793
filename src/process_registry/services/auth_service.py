"""
process_registry.services.auth_service

Login: password check against the stored bcrypt hash, then token issuing.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from process_registry.auth.models import Identity
from process_registry.auth.passwords import verify_password
from process_registry.auth.tokens import TokenService
from process_registry.db.repositories.users import UserRepo
from process_registry.errors import InvalidCredentials
from process_registry.observability.logging import get_logger

log = get_logger(__name__)


class AuthService:
    def __init__(self, *, session: AsyncSession, tokens: TokenService) -> None:
        self._users = UserRepo(session)
        self._tokens = tokens

    async def login(self, *, email: str, password: str) -> str:
        user = await self._users.get_by_email(email)
        # Same error for unknown email and wrong password.
        if user is None or not verify_password(password, user.password_hash):
            log.info("login_failed")
            raise InvalidCredentials()

        identity = Identity(id=user.id, email=user.email, role=user.role, name=user.name)
        token = self._tokens.issue(identity)
        log.info("login_succeeded", user_id=str(user.id))
        return token
