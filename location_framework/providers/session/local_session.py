"""
Fixed local identity, for offline use and the test preset.
"""

from typing import Any, Dict, Optional

try:
    from ...interfaces.session import SessionInterface
    from ...models.data_models import UserSession
    from ...utils.error_handling import AuthenticationError
except ImportError:
    from location_framework.interfaces.session import SessionInterface
    from location_framework.models.data_models import UserSession
    from location_framework.utils.error_handling import AuthenticationError


class LocalSession(SessionInterface):
    """Session whose user comes straight from configuration."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self._user_id: Optional[str] = config.get("user_id")
        self._email: Optional[str] = config.get("email")

    async def initialize(self) -> bool:
        return True

    async def get_user(self) -> UserSession:
        if not self._user_id:
            raise AuthenticationError("No local user configured")
        return UserSession(user_id=self._user_id, email=self._email)

    async def sign_out(self) -> None:
        self._user_id = None
        self._email = None

    async def cleanup(self) -> None:
        pass
