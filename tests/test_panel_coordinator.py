"""
Tests for PanelCoordinator.
"""

import pytest

from location_framework.core import PanelCoordinator, SavedLocationRegistry
from location_framework.models import PanelName

from conftest import USER_ID, PARIS


class TestAddPanel:

    async def test_toggle_clears_search(self, panels, search_controller):
        panels.toggle_add_panel()
        await search_controller.set_query("Paris")
        assert search_controller.results == (PARIS,)

        panels.toggle_add_panel()

        assert panels.add_panel_visible is False
        assert search_controller.query == ""
        assert search_controller.results == ()

    async def test_open_clears_stale_search(self, panels, search_controller):
        await search_controller.set_query("P")

        panels.open_add_panel()

        assert panels.add_panel_visible is True
        assert search_controller.query == ""

    def test_open_twice_emits_once(self, panels):
        assert panels.open_add_panel() is not None
        assert panels.open_add_panel() is None
        assert len(panels.get_transition_history()) == 1


@pytest.fixture
async def loaded(seeded_store, search_controller, notifier):
    """Coordinator over a registry already holding the seeded rows."""
    registry = SavedLocationRegistry(seeded_store, notifier)
    await registry.list(USER_ID)
    return PanelCoordinator(search_controller, registry), registry


class TestMapPanel:

    async def test_open_with_target_selects_it(self, loaded):
        panels, registry = loaded
        target = registry.get("loc-old")

        panels.toggle_map(target)

        assert panels.map_panel_visible is True
        assert panels.selected_location == target

    async def test_every_close_path_clears_selection(self, loaded):
        panels, registry = loaded
        target = registry.get("loc-old")

        panels.open_map(target)
        panels.toggle_map()
        assert panels.selected_location is None

        panels.open_map(target)
        panels.close_map()
        assert panels.selected_location is None

        panels.open_map(target)
        panels.reset()
        assert panels.selected_location is None
        assert panels.map_panel_visible is False

    async def test_reopening_visible_map_retargets(self, loaded):
        panels, registry = loaded
        target, other = registry.get("loc-old"), registry.get("loc-new")

        panels.open_map(target)
        assert panels.open_map(other) is None

        assert panels.selected_location == other
        assert len(panels.get_transition_history()) == 1

    async def test_unknown_target_opens_without_selection(self, loaded):
        panels, registry = loaded
        target = registry.get("loc-old")
        registry.reset()

        panels.open_map(target)

        assert panels.map_panel_visible is True
        assert panels.selected_location is None

    def test_open_without_target(self, panels):
        panels.toggle_map()

        assert panels.map_panel_visible is True
        assert panels.selected_location is None

    async def test_state_snapshot(self, loaded):
        panels, registry = loaded
        target = registry.get("loc-old")
        panels.open_add_panel()
        panels.open_map(target)

        state = panels.state

        assert state.add_panel_visible is True
        assert state.map_panel_visible is True
        assert state.selected_location == target


class TestIndependence:

    async def test_closing_map_leaves_add_panel_and_search(self, loaded, search_controller):
        panels, registry = loaded
        panels.open_add_panel()
        panels.open_map(registry.get("loc-old"))
        await search_controller.set_query("Paris")

        panels.toggle_map()

        assert panels.map_panel_visible is False
        assert panels.add_panel_visible is True
        assert search_controller.query == "Paris"
        assert search_controller.results == (PARIS,)

    async def test_closing_add_panel_leaves_map_and_selection(self, loaded):
        panels, registry = loaded
        target = registry.get("loc-new")
        panels.open_map(target)
        panels.open_add_panel()

        panels.toggle_add_panel()

        assert panels.add_panel_visible is False
        assert panels.map_panel_visible is True
        assert panels.selected_location == target
        assert len(registry.locations) == 2


class TestTransitions:

    def test_open_and_close_values(self, panels):
        opened = panels.open_add_panel()
        closed = panels.close_add_panel()

        assert (opened.panel, opened.start_value, opened.end_value) == (PanelName.ADD_LOCATION, 0.0, 1.0)
        assert (closed.start_value, closed.end_value) == (1.0, 0.0)
        assert opened.duration == 0.3
        assert opened.value_at(0.5) == 0.5
        assert closed.value_at(0.25) == 0.75
        assert opened.value_at(2.0) == 1.0
        assert opened.value_at(-1.0) == 0.0

    def test_listeners_receive_transitions(self, panels):
        seen = []
        panels.add_listener(seen.append)

        panels.toggle_map()
        panels.toggle_map()
        panels.remove_listener(seen.append)
        panels.toggle_map()

        assert [(t.panel, t.visible) for t in seen] == [(PanelName.MAP, True), (PanelName.MAP, False)]

    def test_failing_listener_does_not_block_state(self, panels):
        def broken(transition):
            raise RuntimeError("render failed")

        seen = []
        panels.add_listener(broken)
        panels.add_listener(seen.append)

        panels.open_add_panel()

        assert panels.add_panel_visible is True
        assert len(seen) == 1

    def test_history_is_bounded(self, panels):
        for _ in range(10):
            panels.toggle_add_panel()

        history = panels.get_transition_history(last_n=100)
        assert len(history) == 5
        assert [t.visible for t in history] == [False, True, False, True, False]
        assert panels.get_transition_history(last_n=2) == history[-2:]

    def test_status(self, search_controller, registry):
        coordinator = PanelCoordinator(search_controller, registry)
        coordinator.open_add_panel()

        assert coordinator.get_status() == {
            'add_panel_visible': True,
            'map_panel_visible': False,
            'selected_location': None,
            'history_size': 1,
        }
