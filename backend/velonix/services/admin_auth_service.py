"""
Admin Auth Service - credential store and admin sessions

Handles:
- Seeding the single administrator on first boot
- Password login that issues a signed, time-limited token
- Verifying bearer tokens for the review endpoints
"""

from datetime import datetime
from functools import lru_cache
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from velonix.core.config import DEV_ADMIN_PASSWORD, Settings, settings as default_settings
from velonix.core.exceptions import InvalidCredentialsError, UnauthorizedError
from velonix.core.logging_config import logger, set_admin_id
from velonix.core.security import create_access_token, decode_token, get_password_hash, verify_password
from velonix.models.admin import AdminUser
from velonix.schemas.auth import AdminIdentity


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Checked against when the username is unknown so both failures cost the same
    return get_password_hash("velonix-unknown-admin")


class AdminAuthService:
    """Login and token verification for the administrator"""

    def __init__(self, db: AsyncSession, config: Optional[Settings] = None):
        self.db = db
        self.config = config or default_settings

    async def ensure_seeded(self) -> bool:
        """
        Create the administrator if no credential exists yet.

        Returns True if a credential was created.
        """
        count = await self.db.scalar(select(func.count(AdminUser.id)))
        if count:
            return False

        password = self.config.ADMIN_PASSWORD
        if not password:
            if self.config.is_production:
                raise RuntimeError("ADMIN_PASSWORD must be set in production")
            logger.warning(
                "[Auth] ADMIN_PASSWORD not set - seeding admin with the development default password"
            )
            password = DEV_ADMIN_PASSWORD

        admin = AdminUser(
            username=self.config.ADMIN_USERNAME,
            password_hash=get_password_hash(password),
        )
        self.db.add(admin)
        await self.db.commit()
        logger.info(f"[Auth] Seeded admin user '{admin.username}'")
        return True

    async def login(self, username: str, password: str, client_ip: Optional[str] = None) -> str:
        """
        Check credentials and issue an access token.

        Raises:
            InvalidCredentialsError for an unknown user or a wrong password
        """
        result = await self.db.execute(select(AdminUser).where(AdminUser.username == username))
        admin = result.scalar_one_or_none()

        password_ok = verify_password(password or "", admin.password_hash if admin else _dummy_hash())
        if admin is None or not password_ok:
            logger.log_auth_event(
                event="login",
                success=False,
                username=username,
                reason="unknown user" if admin is None else "wrong password",
                client_ip=client_ip,
            )
            raise InvalidCredentialsError()

        admin.last_login = datetime.utcnow()
        await self.db.commit()

        token = create_access_token({"sub": str(admin.id), "username": admin.username})
        logger.log_auth_event(event="login", success=True, username=admin.username, client_ip=client_ip)
        return token

    async def authorize(self, token: Optional[str]) -> AdminIdentity:
        """
        Verify a bearer token and return the admin it was issued to.

        Raises:
            UnauthorizedError if the token is missing, malformed, expired,
            signed with another key or refers to an admin that no longer exists
        """
        payload = decode_token(token or "")

        try:
            admin_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise UnauthorizedError()

        admin = await self.db.get(AdminUser, admin_id)
        if admin is None:
            raise UnauthorizedError()

        set_admin_id(str(admin.id))
        return AdminIdentity(id=admin.id, username=admin.username)
