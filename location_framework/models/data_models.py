"""
Common data structures for the location framework.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple
from datetime import datetime, timezone
from enum import Enum


FALLBACK_LOCATION_NAME = "Current Location"


class PermissionStatus(str, Enum):
    """Result of a foreground location permission request."""
    GRANTED = "granted"
    DENIED = "denied"


class CaptureOutcome(str, Enum):
    """How a current-location capture ended."""
    SAVED = "saved"
    NO_IDENTITY = "no_identity"
    PERMISSION_DENIED = "permission_denied"
    CAPTURE_FAILED = "capture_failed"
    SAVE_FAILED = "save_failed"


class PanelName(str, Enum):
    """Togglable overlays on the locations screen."""
    ADD_LOCATION = "add_location"
    MAP = "map"


def _validate_coordinates(latitude: float, longitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"Latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError(f"Longitude out of range: {longitude}")


def parse_timestamp(value: Any) -> datetime:
    """Parse a store timestamp (ISO string or datetime) into an aware datetime."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class Coordinates:
    """A point on Earth."""
    latitude: float
    longitude: float

    def __post_init__(self):
        _validate_coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class Address:
    """Reverse-geocoded address components (any may be missing)."""
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None

    def display_name(self) -> str:
        """Join the non-empty components, or fall back to the generic name."""
        parts = [
            part.strip()
            for part in (self.city, self.region, self.country)
            if part and part.strip()
        ]
        return ", ".join(parts) or FALLBACK_LOCATION_NAME


@dataclass(frozen=True)
class SearchResult:
    """A geocoding match that has not been saved."""
    name: str
    country: Optional[str]
    latitude: float
    longitude: float

    @property
    def key(self) -> Tuple[str, float, float]:
        """Identity used for list keys; results carry no id."""
        return (self.name, self.latitude, self.longitude)

    @property
    def display_name(self) -> str:
        if self.country:
            return f"{self.name}, {self.country}"
        return self.name


@dataclass(frozen=True)
class SavedLocation:
    """A persisted, user-owned named point. Never mutated in place."""
    id: str
    user_id: str
    name: str
    latitude: float
    longitude: float
    created_at: datetime

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Saved location name must not be empty")
        _validate_coordinates(self.latitude, self.longitude)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SavedLocation":
        """Build from a `saved_locations` row."""
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name=row["name"],
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
            created_at=parse_timestamp(row["created_at"]),
        )

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'created_at': self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class UserSession:
    """The authenticated identity the screen acts for."""
    user_id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class WeatherRequest:
    """Handoff payload for the weather display."""
    latitude: float
    longitude: float
    location_name: str

    @classmethod
    def for_location(cls, location: SavedLocation) -> "WeatherRequest":
        return cls(
            latitude=location.latitude,
            longitude=location.longitude,
            location_name=location.name,
        )


@dataclass(frozen=True)
class PanelState:
    """Snapshot of overlay visibility and map selection."""
    add_panel_visible: bool = False
    map_panel_visible: bool = False
    selected_location: Optional[SavedLocation] = None


@dataclass(frozen=True)
class PanelTransition:
    """
    A discrete panel transition, published for the rendering layer.

    The animation value runs from start_value to end_value over duration
    seconds; only the endpoints belong to the panel state.
    """
    panel: PanelName
    visible: bool
    start_value: float
    end_value: float
    duration: float
    target: Optional[SavedLocation] = None
    timestamp: float = field(default_factory=lambda: datetime.now().timestamp())

    def value_at(self, progress: float) -> float:
        """Linear interpolation for a progress fraction, clamped to [0, 1]."""
        progress = min(max(progress, 0.0), 1.0)
        return self.start_value + (self.end_value - self.start_value) * progress
