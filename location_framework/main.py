"""
CLI entrypoint for the saved-locations screen.

Usage examples:
  - List saved locations:
      python -m location_framework.main list

  - Search and save a place:
      python -m location_framework.main search --query "Tokyo"
      python -m location_framework.main save --query "Tokyo" --index 0

  - Save the current device location:
      python -m location_framework.main here

  - Delete, map and weather:
      python -m location_framework.main delete --id 42 --yes
      python -m location_framework.main map --id 42
      python -m location_framework.main weather --id 42

  - Interactive session against the in-memory store:
      python -m location_framework.main shell --env test
"""

import asyncio
import json
import shlex
from argparse import ArgumentParser
from typing import Any, Dict, Optional

from . import config as framework_config
from .models import CaptureOutcome, SavedLocation
from .providers import ConsoleNotifier, ConsoleConfirmation, ConsoleNavigator
from .screen import LocationsScreen, create_screen, format_saved_date
from .utils.logging_config import setup_logging


def _build_config(env: str,
                  geocoding: Optional[str],
                  store: Optional[str],
                  device_location: Optional[str],
                  session: Optional[str]) -> Dict[str, Any]:
    """Create configuration with optional provider overrides."""
    if any([geocoding, store, device_location, session]):
        framework_config.set_providers(
            geocoding=geocoding,
            store=store,
            device_location=device_location,
            session=session,
        )

    if env and env != "default":
        framework_config.set_active_preset(env)
    cfg = framework_config.get_config_for_preset()

    setup_logging(**cfg["logging"])
    return cfg


async def _open_screen(args, auto_answer: Optional[bool] = None) -> Optional[LocationsScreen]:
    """Build the screen and load the signed-in user's data; None when signed out."""
    config = _build_config(
        env=args.env,
        geocoding=args.geocoding,
        store=args.store,
        device_location=args.device_location,
        session=args.session,
    )
    screen = await create_screen(
        config,
        notifier=ConsoleNotifier(),
        confirmation=ConsoleConfirmation(auto_answer=auto_answer),
        navigator=ConsoleNavigator(),
    )
    if not await screen.load():
        await screen.cleanup()
        return None
    return screen


def _print_locations(screen: LocationsScreen) -> None:
    if screen.full_name:
        print(f"👤 {screen.full_name}")
    if not screen.locations:
        print("No saved locations yet.")
        return
    for location in screen.locations:
        print(f"[{location.id}] {location.name}")
        print(f"    {location.latitude:.4f}, {location.longitude:.4f}")
        print(f"    Saved on {format_saved_date(location.created_at)}")


def _find(screen: LocationsScreen, location_id: str) -> Optional[SavedLocation]:
    location = screen.registry.get(location_id)
    if location is None:
        print(f"❌ No saved location with id {location_id}")
    return location


async def cmd_list(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        _print_locations(screen)
        return 0
    finally:
        await screen.cleanup()


async def cmd_search(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        screen.toggle_add_panel()
        results = await screen.set_query(args.query)
        if not results:
            print("No results.")
        for index, result in enumerate(results):
            print(f"{index}: {result.display_name} ({result.latitude:.4f}, {result.longitude:.4f})")
        return 0
    finally:
        await screen.cleanup()


async def cmd_save(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        screen.toggle_add_panel()
        results = await screen.set_query(args.query)
        if not 0 <= args.index < len(results):
            print(f"❌ No result at index {args.index} ({len(results)} results)")
            return 1
        saved = await screen.save_search_result(results[args.index])
        return 0 if saved else 1
    finally:
        await screen.cleanup()


async def cmd_delete(args) -> int:
    screen = await _open_screen(args, auto_answer=True if args.yes else None)
    if screen is None:
        return 1
    try:
        location = _find(screen, args.id)
        if location is None:
            return 1
        return 0 if await screen.request_delete(location) else 1
    finally:
        await screen.cleanup()


async def cmd_here(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        outcome = await screen.capture_current_location()
        print(f"📍 {outcome.value}")
        return 0 if outcome == CaptureOutcome.SAVED else 1
    finally:
        await screen.cleanup()


async def cmd_map(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        location = None
        if args.id:
            location = _find(screen, args.id)
            if location is None:
                return 1
        screen.toggle_map(location)
        print(json.dumps(screen.panels.get_status(), indent=2, default=str))
        return 0
    finally:
        await screen.cleanup()


async def cmd_weather(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        location = _find(screen, args.id)
        if location is None:
            return 1
        screen.view_weather(location)
        return 0
    finally:
        await screen.cleanup()


async def cmd_status(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        print(json.dumps(screen.get_status(), indent=2, default=str))
        return 0
    finally:
        await screen.cleanup()


async def cmd_logout(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    try:
        return 0 if await screen.logout() else 1
    finally:
        await screen.cleanup()


SHELL_HELP = """Commands:
  list                 show saved locations
  refresh              reload saved locations
  add                  toggle the add-location panel
  search <text>        search places (opens the add panel)
  save <n>             save search result n
  here                 save the current device location
  delete <id>          delete a saved location
  map [id]             toggle the map, optionally on a location
  weather <id>         open weather for a location
  status               show screen status
  logout               sign out and exit
  quit                 exit"""


async def _shell_step(screen: LocationsScreen, command: str, argv) -> bool:
    """Run one shell command; False ends the session."""
    if command in ("quit", "exit"):
        return False
    if command == "help":
        print(SHELL_HELP)
    elif command == "list":
        _print_locations(screen)
    elif command == "refresh":
        await screen.refresh()
        _print_locations(screen)
    elif command == "add":
        screen.toggle_add_panel()
        print(f"Add panel {'open' if screen.panels.add_panel_visible else 'closed'}")
    elif command == "search":
        if not screen.panels.add_panel_visible:
            screen.toggle_add_panel()
        results = await screen.set_query(" ".join(argv))
        for index, result in enumerate(results):
            print(f"{index}: {result.display_name}")
    elif command == "save":
        results = screen.search.results
        if not argv or not argv[0].isdigit() or int(argv[0]) >= len(results):
            print("Usage: save <n> (after a search)")
        else:
            await screen.save_search_result(results[int(argv[0])])
    elif command == "here":
        outcome = await screen.capture_current_location()
        print(f"📍 {outcome.value}")
    elif command == "delete":
        location = _find(screen, argv[0]) if argv else None
        if location is not None:
            await screen.request_delete(location)
    elif command == "map":
        location = _find(screen, argv[0]) if argv else None
        if argv and location is None:
            return True
        screen.toggle_map(location)
        selected = screen.panels.selected_location
        state = "open" if screen.panels.map_panel_visible else "closed"
        print(f"🗺️  Map {state}" + (f" on {selected.name}" if selected else ""))
    elif command == "weather":
        location = _find(screen, argv[0]) if argv else None
        if location is not None:
            screen.view_weather(location)
    elif command == "status":
        print(json.dumps(screen.get_status(), indent=2, default=str))
    elif command == "logout":
        return not await screen.logout()
    else:
        print(f"Unknown command: {command} (try 'help')")
    return True


async def cmd_shell(args) -> int:
    screen = await _open_screen(args)
    if screen is None:
        return 1
    loop = asyncio.get_running_loop()
    try:
        _print_locations(screen)
        print("Type 'help' for commands.")
        while True:
            try:
                line = await loop.run_in_executor(None, input, "📍 > ")
            except EOFError:
                break
            try:
                parts = shlex.split(line)
            except ValueError as e:
                print(f"❌ {e}")
                continue
            if not parts:
                continue
            if not await _shell_step(screen, parts[0].lower(), parts[1:]):
                break
        return 0
    finally:
        await screen.cleanup()


def _add_common_args(p):
    p.add_argument("--env", choices=["dev", "prod", "test", "default"], default="default",
                   help="Configuration profile to use (default comes from location_framework.config.CONFIG_PRESET)")
    p.add_argument("--geocoding", help="Override geocoding provider")
    p.add_argument("--store", help="Override location store provider")
    p.add_argument("--device-location", dest="device_location", help="Override device location provider")
    p.add_argument("--session", help="Override session provider")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="location_framework")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List saved locations")
    _add_common_args(p_list)
    p_list.set_defaults(func=cmd_list)

    p_search = sub.add_parser("search", help="Search places by name")
    _add_common_args(p_search)
    p_search.add_argument("--query", required=True, help="Place name to search for")
    p_search.set_defaults(func=cmd_search)

    p_save = sub.add_parser("save", help="Search and save one result")
    _add_common_args(p_save)
    p_save.add_argument("--query", required=True, help="Place name to search for")
    p_save.add_argument("--index", type=int, default=0, help="Result to save (default: first)")
    p_save.set_defaults(func=cmd_save)

    p_delete = sub.add_parser("delete", help="Delete a saved location")
    _add_common_args(p_delete)
    p_delete.add_argument("--id", required=True, help="Saved location id")
    p_delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    p_delete.set_defaults(func=cmd_delete)

    p_here = sub.add_parser("here", help="Save the current device location")
    _add_common_args(p_here)
    p_here.set_defaults(func=cmd_here)

    p_map = sub.add_parser("map", help="Toggle the map panel")
    _add_common_args(p_map)
    p_map.add_argument("--id", help="Saved location to focus")
    p_map.set_defaults(func=cmd_map)

    p_weather = sub.add_parser("weather", help="Hand a saved location to the weather view")
    _add_common_args(p_weather)
    p_weather.add_argument("--id", required=True, help="Saved location id")
    p_weather.set_defaults(func=cmd_weather)

    p_status = sub.add_parser("status", help="Show screen status")
    _add_common_args(p_status)
    p_status.set_defaults(func=cmd_status)

    p_logout = sub.add_parser("logout", help="Sign out")
    _add_common_args(p_logout)
    p_logout.set_defaults(func=cmd_logout)

    p_shell = sub.add_parser("shell", help="Interactive session")
    _add_common_args(p_shell)
    p_shell.set_defaults(func=cmd_shell)

    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    except ValueError as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
