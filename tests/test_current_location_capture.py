"""
Tests for CurrentLocationCapture.
"""

from location_framework.models import Address, CaptureOutcome, PermissionStatus
from location_framework.utils import DeviceLocationError, ReverseGeocodingError, ErrorSeverity

from conftest import USER_ID


class TestCaptureAndSave:

    async def test_saves_with_reverse_geocoded_name(self, capture, registry, device, notifier):
        outcome = await capture.capture_and_save(USER_ID)

        assert outcome == CaptureOutcome.SAVED
        saved = registry.locations[0]
        assert saved.name == "Shibuya, Tokyo, Japan"
        assert (saved.latitude, saved.longitude) == (device.position.latitude, device.position.longitude)
        assert notifier.notices == [("Success", "Your current location has been saved.")]
        assert capture.is_capturing is False

    async def test_partial_address_joins_present_parts(self, capture, registry, device):
        device.addresses = [Address(city=None, region="Bavaria", country="Germany")]

        await capture.capture_and_save(USER_ID)

        assert registry.locations[0].name == "Bavaria, Germany"

    async def test_no_address_components_uses_fallback_name(self, capture, registry, device):
        device.addresses = []

        outcome = await capture.capture_and_save(USER_ID)

        assert outcome == CaptureOutcome.SAVED
        assert registry.locations[0].name == "Current Location"

    async def test_empty_address_uses_fallback_name(self, capture, registry, device):
        device.addresses = [Address()]

        await capture.capture_and_save(USER_ID)

        assert registry.locations[0].name == "Current Location"

    async def test_reverse_geocoding_failure_still_saves(self, capture, registry, device, error_handler):
        device.reverse_error = ReverseGeocodingError("HTTP 503")

        outcome = await capture.capture_and_save(USER_ID)

        assert outcome == CaptureOutcome.SAVED
        assert registry.locations[0].name == "Current Location"
        assert error_handler.get_error_history("capture")[0].severity == ErrorSeverity.WARNING


class TestCaptureRefusals:

    async def test_permission_denied_writes_nothing(self, capture, registry, store, device, notifier):
        device.permission = PermissionStatus.DENIED

        outcome = await capture.capture_and_save(USER_ID)

        assert outcome == CaptureOutcome.PERMISSION_DENIED
        assert store.inserts == 0
        assert registry.locations == ()
        assert device.position_requests == 0
        assert notifier.notices == [
            ("Permission Denied", "Location permission is required to use this feature."),
        ]

    async def test_no_identity_asks_for_nothing(self, capture, store, device, notifier):
        outcome = await capture.capture_and_save(None)

        assert outcome == CaptureOutcome.NO_IDENTITY
        assert device.permission_requests == 0
        assert store.inserts == 0
        assert notifier.notices == []

    async def test_position_failure_writes_nothing(self, capture, store, device, notifier):
        device.position_error = DeviceLocationError("no fix")

        outcome = await capture.capture_and_save(USER_ID)

        assert outcome == CaptureOutcome.CAPTURE_FAILED
        assert store.inserts == 0
        assert notifier.notices == [("Error", "Unable to get your current location.")]

    async def test_permission_request_failure(self, capture, store, device, notifier):
        device.permission_error = DeviceLocationError("prompt crashed")

        outcome = await capture.capture_and_save(USER_ID)

        assert outcome == CaptureOutcome.CAPTURE_FAILED
        assert store.inserts == 0
        assert notifier.notices == [("Error", "Unable to get your current location.")]

    async def test_store_failure_reports_save_failed(self, capture, registry, store, notifier):
        store.fail.add("insert")

        outcome = await capture.capture_and_save(USER_ID)

        assert outcome == CaptureOutcome.SAVE_FAILED
        assert registry.locations == ()
        assert notifier.notices == [("Error", "Unable to save your current location.")]
