"""
Supabase auth session provider.

Signs in with email/password on initialize (when credentials are configured)
and exposes its client so the location store runs under the same JWT.
"""

import asyncio
import os
from typing import Any, Dict, Optional

from supabase import create_client, Client

try:
    from ...interfaces.session import SessionInterface
    from ...models.data_models import UserSession
    from ...utils.error_handling import AuthenticationError
    from ...utils.logging_config import get_logger
except ImportError:
    from location_framework.interfaces.session import SessionInterface
    from location_framework.models.data_models import UserSession
    from location_framework.utils.error_handling import AuthenticationError
    from location_framework.utils.logging_config import get_logger


logger = get_logger("session")


class SupabaseAuthSession(SessionInterface):
    """
    Session backed by Supabase auth.

    Configuration:
        - url / key: Supabase project URL and anon key
        - email / password: Credentials for password sign-in (optional)
    """

    def __init__(self, config: Dict[str, Any]):
        self.url = config.get("url") or os.getenv("SUPABASE_URL")
        self.key = config.get("key") or os.getenv("SUPABASE_KEY")

        if not self.url or not self.key:
            raise ValueError("Supabase URL and key are required")

        self.email = config.get("email") or os.getenv("SUPABASE_EMAIL")
        self.password = config.get("password") or os.getenv("SUPABASE_PASSWORD")
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        """Supabase client, created on first use."""
        if self._client is None:
            self._client = create_client(self.url, self.key)
        return self._client

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def initialize(self) -> bool:
        if not self.email or not self.password:
            logger.info("No Supabase credentials configured, expecting an existing session")
            return True

        try:
            await self._run(
                self.client.auth.sign_in_with_password,
                {"email": self.email, "password": self.password},
            )
            logger.info("Signed in to Supabase as %s", self.email)
            return True
        except Exception as e:
            logger.error("Supabase sign-in failed: %s", e)
            return False

    async def get_user(self) -> UserSession:
        try:
            response = await self._run(self.client.auth.get_user)
        except Exception as e:
            raise AuthenticationError(f"Unable to fetch user: {e}") from e

        user = getattr(response, "user", None) if response else None
        if user is None:
            raise AuthenticationError("No authenticated user")

        return UserSession(user_id=str(user.id), email=getattr(user, "email", None))

    async def sign_out(self) -> None:
        try:
            await self._run(self.client.auth.sign_out)
        except Exception as e:
            raise AuthenticationError(f"Sign-out failed: {e}") from e

    async def cleanup(self) -> None:
        self._client = None
