"""
Pytest configuration and shared fixtures for location framework tests.
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from location_framework.core import (  # noqa: E402
    SearchController,
    SavedLocationRegistry,
    CurrentLocationCapture,
    PanelCoordinator,
)
from location_framework.interfaces import (  # noqa: E402
    GeocodingInterface,
    DeviceLocationInterface,
    NotifierInterface,
    ConfirmationInterface,
    NavigatorInterface,
)
from location_framework.models import (  # noqa: E402
    Address,
    Coordinates,
    PermissionStatus,
    SearchResult,
    WeatherRequest,
)
from location_framework.providers import InMemoryLocationStore, LocalSession  # noqa: E402
from location_framework.screen import LocationsScreen  # noqa: E402
from location_framework.utils import (  # noqa: E402
    ErrorHandler,
    LocationStoreError,
)


USER_ID = "user-1"
OTHER_USER_ID = "user-2"

PARIS = SearchResult(name="Paris", country="France", latitude=48.8566, longitude=2.3522)
TOKYO = SearchResult(name="Tokyo", country="Japan", latitude=35.6895, longitude=139.6917)


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next real wait."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# =============================================================================
# Fakes
# =============================================================================

class FakeGeocoder(GeocodingInterface):
    """
    Geocoder with canned answers.

    With hold=True every call parks on a future until release(query) is called,
    so tests decide the order in which overlapping searches complete.
    """

    def __init__(self, responses: Optional[Dict[str, List[SearchResult]]] = None):
        self.responses = responses or {}
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None
        self.hold = False
        self._pending: Dict[str, asyncio.Future] = {}
        self._in_flight = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    async def initialize(self) -> bool:
        return True

    async def search(self, query: str, count: int = 5, language: str = "en") -> List[SearchResult]:
        self.calls.append((query, count, language))
        self._in_flight += 1
        try:
            if self.error:
                raise self.error
            if self.hold:
                future = asyncio.get_running_loop().create_future()
                self._pending[query] = future
                return await future
            return list(self.responses.get(query, []))
        finally:
            self._in_flight -= 1

    def release(self, query: str, results: Optional[List[SearchResult]] = None) -> None:
        if results is None:
            results = list(self.responses.get(query, []))
        self._pending.pop(query).set_result(results)

    def fail(self, query: str, error: Exception) -> None:
        self._pending.pop(query).set_exception(error)

    @property
    def queries(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def cleanup(self) -> None:
        pass


class FakeDeviceLocation(DeviceLocationInterface):
    """Scripted permission, position fix and reverse geocoding."""

    def __init__(self):
        self.permission = PermissionStatus.GRANTED
        self.position = Coordinates(35.6595, 139.7005)
        self.addresses: List[Address] = [Address(city="Shibuya", region="Tokyo", country="Japan")]
        self.permission_error: Optional[Exception] = None
        self.position_error: Optional[Exception] = None
        self.reverse_error: Optional[Exception] = None
        self.permission_requests = 0
        self.position_requests = 0

    async def initialize(self) -> bool:
        return True

    async def request_permission(self) -> PermissionStatus:
        self.permission_requests += 1
        if self.permission_error:
            raise self.permission_error
        return self.permission

    async def get_current_position(self) -> Coordinates:
        self.position_requests += 1
        if self.position_error:
            raise self.position_error
        return self.position

    async def reverse_geocode(self, coordinates: Coordinates) -> List[Address]:
        if self.reverse_error:
            raise self.reverse_error
        return list(self.addresses)

    async def cleanup(self) -> None:
        pass


class ControllableStore(InMemoryLocationStore):
    """In-memory store whose operations can be made to fail by name."""

    def __init__(self, config=None):
        super().__init__(config)
        self.fail: Set[str] = set()
        self.inserts = 0
        # When set, the next list call parks here until the event fires
        self.list_gate: Optional[asyncio.Event] = None

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail:
            raise LocationStoreError(f"{operation} failed")

    async def list_locations(self, user_id):
        gate, self.list_gate = self.list_gate, None
        if gate is not None:
            await gate.wait()
        self._maybe_fail("list")
        return await super().list_locations(user_id)

    async def insert_location(self, user_id, name, latitude, longitude):
        self._maybe_fail("insert")
        self.inserts += 1
        return await super().insert_location(user_id, name, latitude, longitude)

    async def delete_location(self, location_id, user_id):
        self._maybe_fail("delete")
        return await super().delete_location(location_id, user_id)

    async def fetch_profile_name(self, user_id):
        self._maybe_fail("profile")
        return await super().fetch_profile_name(user_id)


class RecordingNotifier(NotifierInterface):
    def __init__(self):
        self.notices: List[tuple] = []

    def notify(self, title: str, message: str) -> None:
        self.notices.append((title, message))


class RecordingConfirmation(ConfirmationInterface):
    def __init__(self, answer: bool = True):
        self.answer = answer
        self.asked: List[dict] = []

    async def ask(self, title, message, confirm_label="OK", cancel_label="Cancel") -> bool:
        self.asked.append({
            "title": title,
            "message": message,
            "confirm_label": confirm_label,
            "cancel_label": cancel_label,
        })
        return self.answer


class RecordingNavigator(NavigatorInterface):
    def __init__(self):
        self.weather_requests: List[WeatherRequest] = []
        self.sign_in_count = 0

    def to_weather(self, request: WeatherRequest) -> None:
        self.weather_requests.append(request)

    def to_sign_in(self) -> None:
        self.sign_in_count += 1


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def confirmation():
    return RecordingConfirmation()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def error_handler(notifier):
    return ErrorHandler(notifier)


@pytest.fixture
def geocoder():
    return FakeGeocoder({
        "Paris": [PARIS],
        "Tokyo": [TOKYO],
    })


@pytest.fixture
def device():
    return FakeDeviceLocation()


@pytest.fixture
def saved_rows():
    """Two rows for USER_ID and one for another user."""
    return [
        {
            "id": "loc-old",
            "user_id": USER_ID,
            "name": "Paris, France",
            "latitude": 48.8566,
            "longitude": 2.3522,
            "created_at": "2024-01-01T10:00:00Z",
        },
        {
            "id": "loc-new",
            "user_id": USER_ID,
            "name": "Tokyo, Japan",
            "latitude": 35.6895,
            "longitude": 139.6917,
            "created_at": "2024-02-01T10:00:00Z",
        },
        {
            "id": "loc-foreign",
            "user_id": OTHER_USER_ID,
            "name": "Berlin, Germany",
            "latitude": 52.52,
            "longitude": 13.405,
            "created_at": "2024-03-01T10:00:00Z",
        },
    ]


@pytest.fixture
def store():
    return ControllableStore({
        "profiles": {USER_ID: {"first_name": "Jane", "last_name": "Doe"}},
    })


@pytest.fixture
def seeded_store(saved_rows):
    return ControllableStore({
        "profiles": {USER_ID: {"first_name": "Jane", "last_name": "Doe"}},
        "locations": saved_rows,
    })


@pytest.fixture
def search_controller(geocoder, error_handler):
    return SearchController(geocoder, error_handler=error_handler)


@pytest.fixture
def registry(store, notifier, error_handler):
    return SavedLocationRegistry(store, notifier, error_handler)


@pytest.fixture
def capture(device, registry, notifier, error_handler):
    return CurrentLocationCapture(device, registry, notifier, error_handler)


@pytest.fixture
def panels(search_controller, registry):
    return PanelCoordinator(search_controller, registry, {"animation_duration": 0.3, "history_size": 5})


@pytest.fixture
def session():
    return LocalSession({"user_id": USER_ID, "email": "jane@example.com"})


@pytest.fixture
def screen(session, seeded_store, geocoder, device, notifier, confirmation, navigator):
    return LocationsScreen(
        session, seeded_store, geocoder, device,
        notifier, confirmation, navigator,
    )
