"""
Admin accounts: login, account creation and listing
"""

import asyncio
import hmac
import logging
from typing import Any, Dict, List, Optional

from storefront.core.config import Settings
from storefront.core.exceptions import AuthenticationError, ConflictError, ValidationError
from storefront.core.password import hash_password, verify_password
from storefront.core.security import TokenIssuer
from storefront.repositories.document_store import DocumentStore

logger = logging.getLogger(__name__)

ADMIN_KEY = "username"


class AdminService:

    def __init__(self, admins: DocumentStore, token_issuer: TokenIssuer, settings: Settings):
        self.admins = admins
        self.token_issuer = token_issuer
        self.super_admin_username = settings.SUPER_ADMIN_USERNAME
        self.super_admin_password = settings.SUPER_ADMIN_PASSWORD
        self.bcrypt_rounds = settings.BCRYPT_ROUNDS

    def _is_super_admin(self, username: str, password: str) -> bool:
        if not self.super_admin_username or not self.super_admin_password:
            return False
        return (
            hmac.compare_digest(username.encode(), self.super_admin_username.encode())
            and hmac.compare_digest(password.encode(), self.super_admin_password.encode())
        )

    async def login(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Authenticate against the configured super admin first, then the
        admin table (bcrypt).

        Raises:
            ValidationError: username or password missing
            AuthenticationError: credentials do not match
        """
        if not username or not password:
            raise ValidationError("Username and password are required")

        if self._is_super_admin(username, password):
            logger.info("Super admin login successful")
            return {
                "message": "Super admin login successful",
                "token": self.token_issuer.create_admin_token(username, "superadmin"),
                "user": {"name": "Super Admin"},
            }

        item = await self.admins.get({ADMIN_KEY: username.lower()})
        # bcrypt is CPU bound; keep it off the event loop
        if not item or not await asyncio.to_thread(verify_password, password, item.get("password", "")):
            logger.warning(f"Admin login failed for {username.lower()}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"Admin login successful: {item[ADMIN_KEY]}")
        return {
            "message": "Login successful",
            "token": self.token_issuer.create_admin_token(item[ADMIN_KEY], "admin"),
            "user": {"name": item[ADMIN_KEY]},
        }

    async def add_admin(self, username: Optional[str], password: Optional[str]) -> str:
        if not username or not password:
            raise ValidationError("Username and password are required")

        hashed = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)
        try:
            await self.admins.put(
                {ADMIN_KEY: username.lower(), "password": hashed},
                condition_expression="attribute_not_exists(username)",
            )
        except ConflictError:
            raise ConflictError("Username already exists.")

        logger.info(f"Admin user created: {username.lower()}")
        return username

    async def list_admins(self) -> List[Dict[str, Any]]:
        """All admin accounts, without password hashes."""
        items = await self.admins.scan()
        return [{k: v for k, v in item.items() if k != "password"} for item in items]

    async def delete_admin(self, username: str) -> None:
        await self.admins.delete({ADMIN_KEY: username})
