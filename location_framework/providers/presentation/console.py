"""
Console implementations of the presentation collaborators, used by the CLI.
"""

import asyncio
import json
from typing import List, Optional, Tuple

try:
    from ...interfaces.presentation import (
        NotifierInterface,
        ConfirmationInterface,
        NavigatorInterface,
    )
    from ...models.data_models import WeatherRequest
except ImportError:
    from location_framework.interfaces.presentation import (
        NotifierInterface,
        ConfirmationInterface,
        NavigatorInterface,
    )
    from location_framework.models.data_models import WeatherRequest


class ConsoleNotifier(NotifierInterface):
    """Prints notices; keeps them for inspection."""

    ICONS = {
        "Success": "✅",
        "Error": "❌",
        "Permission Denied": "🚫",
    }

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.notices: List[Tuple[str, str]] = []

    def notify(self, title: str, message: str) -> None:
        self.notices.append((title, message))
        if not self.quiet:
            icon = self.ICONS.get(title, "ℹ️ ")
            print(f"{icon} {title}: {message}")


class ConsoleConfirmation(ConfirmationInterface):
    """
    Yes/no prompt on stdin.

    auto_answer short-circuits the prompt (e.g. the CLI's --yes flag).
    """

    def __init__(self, auto_answer: Optional[bool] = None):
        self.auto_answer = auto_answer

    async def ask(
        self,
        title: str,
        message: str,
        confirm_label: str = "OK",
        cancel_label: str = "Cancel"
    ) -> bool:
        if self.auto_answer is not None:
            return self.auto_answer

        prompt = f"❓ {title}: {message} [{confirm_label.lower()}/{cancel_label.lower()}] "
        loop = asyncio.get_running_loop()
        try:
            answer = await loop.run_in_executor(None, input, prompt)
        except EOFError:
            return False
        answer = (answer or "").strip().lower()
        return answer in ("y", "yes", confirm_label.lower())


class ConsoleNavigator(NavigatorInterface):
    """Prints navigation handoffs as JSON."""

    def __init__(self):
        self.last_weather_request: Optional[WeatherRequest] = None
        self.signed_out = False

    def to_weather(self, request: WeatherRequest) -> None:
        self.last_weather_request = request
        print("🌤️  Weather handoff:")
        print(json.dumps({
            "latitude": request.latitude,
            "longitude": request.longitude,
            "locationName": request.location_name,
        }, indent=2))

    def to_sign_in(self) -> None:
        self.signed_out = True
        print("🔐 Redirecting to sign-in")
