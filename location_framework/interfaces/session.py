"""
Abstract interface for the authentication collaborator.
"""

from abc import ABC, abstractmethod

from ..models.data_models import UserSession


class SessionInterface(ABC):
    """Supplies the current identity and ends it on sign-out."""

    @abstractmethod
    async def initialize(self) -> bool:
        pass

    @abstractmethod
    async def get_user(self) -> UserSession:
        """
        Return the authenticated user.

        Raises:
            AuthenticationError: If there is no usable session
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """
        End the session.

        Raises:
            AuthenticationError: If sign-out failed
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        pass
