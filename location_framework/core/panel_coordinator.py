"""
Panel state machine for the Add-Location and Map overlays.
"""

from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

from ..models.data_models import PanelName, PanelState, PanelTransition, SavedLocation
from ..utils.logging_config import get_logger
from .search_controller import SearchController
from .saved_location_registry import SavedLocationRegistry


logger = get_logger("panels")


class PanelCoordinator:
    """
    Two independent hidden/visible sub-machines.

    Add panel: every transition clears the search query and results.
    Map panel: carries an optional target; closing always clears it.

    Each real transition is published as a PanelTransition (0 -> 1 when
    opening, 1 -> 0 when closing) for whatever renders the overlays.
    """

    def __init__(
        self,
        search: SearchController,
        registry: SavedLocationRegistry,
        config: Optional[Dict[str, Any]] = None
    ):
        config = config or {}
        self._search = search
        self._registry = registry
        self.animation_duration = float(config.get("animation_duration", 0.3))
        self._max_history = int(config.get("history_size", 50))

        self._add_visible = False
        self._map_visible = False
        self._selected: Optional[SavedLocation] = None

        self._listeners: List[Callable[[PanelTransition], None]] = []
        self._transition_history: Deque[PanelTransition] = deque(maxlen=self._max_history)

    @property
    def add_panel_visible(self) -> bool:
        return self._add_visible

    @property
    def map_panel_visible(self) -> bool:
        return self._map_visible

    @property
    def selected_location(self) -> Optional[SavedLocation]:
        return self._selected

    @property
    def state(self) -> PanelState:
        return PanelState(
            add_panel_visible=self._add_visible,
            map_panel_visible=self._map_visible,
            selected_location=self._selected,
        )

    def add_listener(self, listener: Callable[[PanelTransition], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[PanelTransition], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, panel: PanelName, visible: bool,
              target: Optional[SavedLocation] = None) -> PanelTransition:
        transition = PanelTransition(
            panel=panel,
            visible=visible,
            start_value=0.0 if visible else 1.0,
            end_value=1.0 if visible else 0.0,
            duration=self.animation_duration,
            target=target,
        )
        self._transition_history.append(transition)

        logger.debug("%s panel → %s", panel.value, "visible" if visible else "hidden")
        for listener in list(self._listeners):
            try:
                listener(transition)
            except Exception as e:
                logger.warning("Panel listener failed: %s", e)
        return transition

    # ------------------------------------------------------------------
    # Add-Location panel
    # ------------------------------------------------------------------

    def open_add_panel(self) -> Optional[PanelTransition]:
        if self._add_visible:
            return None
        self._search.clear()
        self._add_visible = True
        return self._emit(PanelName.ADD_LOCATION, True)

    def close_add_panel(self) -> Optional[PanelTransition]:
        if not self._add_visible:
            return None
        self._search.clear()
        self._add_visible = False
        return self._emit(PanelName.ADD_LOCATION, False)

    def toggle_add_panel(self) -> Optional[PanelTransition]:
        if self._add_visible:
            return self.close_add_panel()
        return self.open_add_panel()

    # ------------------------------------------------------------------
    # Map panel
    # ------------------------------------------------------------------

    def _resolve_target(self, target: Optional[SavedLocation]) -> Optional[SavedLocation]:
        if target is None:
            return None
        current = self._registry.get(target.id)
        if current is None:
            logger.warning("Map target %s is not a saved location, opening without selection", target.id)
        return current

    def open_map(self, target: Optional[SavedLocation] = None) -> Optional[PanelTransition]:
        """
        Show the map, optionally focused on a saved location.

        Opening an already visible map only re-targets it.
        """
        selected = self._resolve_target(target)
        if self._map_visible:
            self._selected = selected
            return None
        self._selected = selected
        self._map_visible = True
        return self._emit(PanelName.MAP, True, target=selected)

    def close_map(self) -> Optional[PanelTransition]:
        self._selected = None
        if not self._map_visible:
            return None
        self._map_visible = False
        return self._emit(PanelName.MAP, False)

    def toggle_map(self, target: Optional[SavedLocation] = None) -> Optional[PanelTransition]:
        if self._map_visible:
            return self.close_map()
        return self.open_map(target)

    def reset(self) -> None:
        """Hide both panels (e.g. on sign-out)."""
        self.close_add_panel()
        self.close_map()

    def get_transition_history(self, last_n: int = 10) -> List[PanelTransition]:
        return list(self._transition_history)[-last_n:]

    def get_status(self) -> Dict[str, Any]:
        return {
            'add_panel_visible': self._add_visible,
            'map_panel_visible': self._map_visible,
            'selected_location': self._selected.id if self._selected else None,
            'history_size': len(self._transition_history),
        }
