"""
Interfaces for the presentation-side collaborators the core talks to:
transient notices, yes/no confirmation, and outbound navigation.
"""

from abc import ABC, abstractmethod

from ..models.data_models import WeatherRequest


class NotifierInterface(ABC):
    """Shows a transient, user-visible notice."""

    @abstractmethod
    def notify(self, title: str, message: str) -> None:
        pass


class ConfirmationInterface(ABC):
    """Presents a modal yes/no prompt."""

    @abstractmethod
    async def ask(
        self,
        title: str,
        message: str,
        confirm_label: str = "OK",
        cancel_label: str = "Cancel"
    ) -> bool:
        """
        Ask the user to confirm an action.

        Returns:
            True if the user chose the confirm option
        """
        pass


class NavigatorInterface(ABC):
    """Outbound navigation to collaborating screens."""

    @abstractmethod
    def to_weather(self, request: WeatherRequest) -> None:
        """Hand a location to the weather display."""
        pass

    @abstractmethod
    def to_sign_in(self) -> None:
        """Hand control to the authentication flow."""
        pass
