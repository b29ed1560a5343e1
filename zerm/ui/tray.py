from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import pystray

from zerm.core.config import FOCUS_SPEC
from zerm.runtime.host import ActionEvent, HostAdapter, LifecycleEvent
from zerm.ui.icons import make_icon

logger = logging.getLogger(__name__)


@dataclass
class TrayButton:
    """One menu entry standing in for a Stream Deck key."""
    uuid: str
    title: str = "…"
    state: int = 1
    on_change: Optional[Callable[[], None]] = None

    def set_title(self, title: str) -> None:
        self.title = title
        self._changed()

    def set_state(self, state: int) -> None:
        self.state = state
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()


def run_tray(adapter: HostAdapter, stop_flag: threading.Event, status_uuid: str = FOCUS_SPEC.action_uuid) -> None:
    """
    Tray menu surface: one item per action, titled with what the action renders.
    The tray icon follows `status_uuid` (by default: is there a Zoom to focus).
    """
    buttons: Dict[str, TrayButton] = {uuid: TrayButton(uuid) for uuid in adapter.uuids()}
    icon = pystray.Icon("Zerm", icon=make_icon(1), title="Zerm")

    def update_icon():
        status = buttons.get(status_uuid)
        if status is not None:
            icon.icon = make_icon(status.state)
            icon.title = f"Zerm ({status.title})"
        if icon.visible:
            icon.update_menu()

    for b in buttons.values():
        b.on_change = update_icon

    def send(uuid: str, kind: LifecycleEvent) -> None:
        adapter.dispatch_in_background(uuid, ActionEvent(kind=kind.value, action=buttons[uuid]))

    def press(uuid: str):
        def on_click(_icon, _item):
            send(uuid, LifecycleEvent.KEY_DOWN)
        return on_click

    def on_refresh(_icon, _item):
        for uuid in buttons:
            send(uuid, LifecycleEvent.WILL_APPEAR)

    def on_quit(_icon, _item):
        stop_flag.set()
        icon.stop()

    items = [pystray.MenuItem(lambda _item, b=b: b.title, press(uuid)) for uuid, b in buttons.items()]
    icon.menu = pystray.Menu(
        *items,
        pystray.Menu.SEPARATOR,
        pystray.MenuItem("Refresh", on_refresh),
        pystray.MenuItem("Quit", on_quit),
    )

    def setup(_icon):
        icon.visible = True
        # the menu becoming visible is this surface's willAppear
        on_refresh(icon, None)

    try:
        icon.run(setup=setup)
    except Exception as e:
        # Tray backends can be fragile; hotkeys keep working without it.
        logger.error("Tray backend crashed: %s", e)
        stop_flag.set()
