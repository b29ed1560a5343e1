from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from zerm.core.types import InjectionError, Shortcut


@dataclass
class KeyboardInjector:
    """
    Minimal shortcut injector using pynput.
    Sends to whatever application is frontmost; the commander makes sure that is Zoom.
    Keep it boring.
    """
    controller: Any
    keys: Any  # pynput.keyboard.Key

    @classmethod
    def create(cls) -> "KeyboardInjector":
        # pynput binds its OS backend on import, which fails on headless hosts
        from pynput import keyboard

        return cls(controller=keyboard.Controller(), keys=keyboard.Key)

    def _modifiers(self, shortcut: Shortcut) -> list:
        mods = []
        for name in shortcut.modifiers:
            key = getattr(self.keys, name, None)
            if key is None:
                raise InjectionError(f"unknown modifier {name!r} in {shortcut}")
            mods.append(key)
        return mods

    def send(self, shortcut: Shortcut) -> None:
        mods = self._modifiers(shortcut)
        try:
            with self.controller.pressed(*mods):
                self.controller.tap(shortcut.key)
        except Exception as e:
            raise InjectionError(f"could not send {shortcut}: {e}") from e
