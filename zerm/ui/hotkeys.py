from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from zerm.core.config import CAPABILITIES
from zerm.core.types import Capability
from zerm.runtime.host import ActionEvent, HostAdapter, LifecycleEvent

logger = logging.getLogger(__name__)

MODIFIERS = frozenset({"ctrl", "alt"})

DEFAULT_BINDINGS: Dict[str, str] = {
    "m": CAPABILITIES[Capability.MUTE].action_uuid,
    "v": CAPABILITIES[Capability.VIDEO].action_uuid,
    "s": CAPABILITIES[Capability.SHARE].action_uuid,
    "l": CAPABILITIES[Capability.LEAVE].action_uuid,
    "f": CAPABILITIES[Capability.FOCUS].action_uuid,
}


@dataclass
class ChordTracker:
    """
    Ctrl+Alt+<key> chords, reported once every key is back up.

    Firing on release keeps the user's held Ctrl/Alt out of the
    shortcut we inject into Zoom. One chord fires per full release: if a
    second bound letter is pressed while Ctrl+Alt are still down, the last
    letter pressed wins and the earlier one is dropped.
    """
    bindings: Dict[str, str]
    pressed: Set[str] = field(default_factory=set)
    armed: Optional[str] = None

    def press(self, name: str) -> None:
        self.pressed.add(name)
        if MODIFIERS <= self.pressed and name in self.bindings:
            self.armed = self.bindings[name]

    def release(self, name: str) -> Optional[str]:
        self.pressed.discard(name)
        if self.pressed or self.armed is None:
            return None
        uuid, self.armed = self.armed, None
        return uuid


@dataclass
class HotkeyButton:
    """Hotkeys have no display and no states: titles go to the log."""
    uuid: str

    def set_title(self, title: str) -> None:
        logger.info("[hotkey] %s → %s", self.uuid.rsplit(".", 1)[-1], title)


def _key_name(key) -> str:
    char = getattr(key, "char", None)
    if char:
        return char.lower()
    return getattr(key, "name", None) or str(key)


def run_hotkeys(adapter: HostAdapter, bindings: Optional[Dict[str, str]] = None) -> None:
    """
    Global hotkeys (blocking):
    - Ctrl+Alt+M: mute      - Ctrl+Alt+V: video
    - Ctrl+Alt+S: share     - Ctrl+Alt+L: leave
    - Ctrl+Alt+F: focus Zoom
    """
    from pynput import keyboard

    tracker = ChordTracker(dict(bindings or DEFAULT_BINDINGS))
    buttons = {uuid: HotkeyButton(uuid) for uuid in tracker.bindings.values()}
    listener: Optional[keyboard.Listener] = None

    def on_press(k):
        tracker.press(_key_name(listener.canonical(k)))

    def on_release(k):
        uuid = tracker.release(_key_name(listener.canonical(k)))
        if uuid is not None:
            adapter.dispatch_in_background(
                uuid, ActionEvent(kind=LifecycleEvent.KEY_DOWN.value, action=buttons[uuid])
            )

    with keyboard.Listener(on_press=on_press, on_release=on_release) as listener:
        listener.join()
