from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol

from zerm.actions.controller import CapabilityController
from zerm.core.control import ActionGate
from zerm.core.types import RenderState

logger = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    WILL_APPEAR = "willAppear"
    KEY_DOWN = "keyDown"


class ActionRef(Protocol):
    """What a surface hands us per button. set_state is optional."""

    def set_title(self, title: str) -> None: ...


@dataclass(frozen=True)
class ActionEvent:
    kind: str
    action: ActionRef
    settings: Mapping[str, Any] = field(default_factory=dict)


def supports_state(action: Any) -> bool:
    """Dials and hotkeys have no discrete states; only call set_state when it exists."""
    return callable(getattr(action, "set_state", None))


@dataclass
class HostAdapter:
    """
    Routes surface events to controllers and controller output back to the surface.

    willAppear → refresh(), keyDown → activate(); anything else is ignored.
    Events for one action are serialised by its gate.
    The shown-actions table is shared by surface threads and guarded separately.
    """
    _controllers: Dict[str, CapabilityController] = field(default_factory=dict)
    _gates: Dict[str, ActionGate] = field(default_factory=dict)
    _actions: Dict[str, Any] = field(default_factory=dict)
    _actions_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def register(self, controller: CapabilityController, uuid: Optional[str] = None) -> None:
        key = uuid or controller.action_uuid
        if key in self._controllers:
            raise ValueError(f"action {key!r} already registered")
        self._controllers[key] = controller
        self._gates[key] = ActionGate(uuid=key)

    def uuids(self) -> list:
        return list(self._controllers)

    def controller(self, uuid: str) -> Optional[CapabilityController]:
        return self._controllers.get(uuid)

    def dispatch(self, uuid: str, event: ActionEvent) -> Optional[RenderState]:
        controller = self._controllers.get(uuid)
        if controller is None:
            logger.warning("No controller for action %s", uuid)
            return None

        try:
            kind = LifecycleEvent(event.kind)
        except ValueError:
            logger.debug("Ignoring %s for %s", event.kind, uuid)
            return None

        with self._gates[uuid].hold():
            with self._actions_lock:
                self._actions[uuid] = event.action
            if kind == LifecycleEvent.WILL_APPEAR:
                state = controller.refresh()
            else:
                state = controller.activate()
            self.render(event.action, state)
        return state

    def render(self, action: Any, state: RenderState) -> None:
        try:
            action.set_title(state.title)
            if supports_state(action):
                action.set_state(state.visual_index)
        except Exception:
            logger.exception("Surface rejected render %s", state)

    def refresh_all(self) -> None:
        """Re-send willAppear to every action a surface has shown us."""
        with self._actions_lock:
            shown = list(self._actions.items())
        for uuid, action in shown:
            self.dispatch(uuid, ActionEvent(kind=LifecycleEvent.WILL_APPEAR.value, action=action))

    def dispatch_in_background(self, uuid: str, event: ActionEvent) -> threading.Thread:
        """For surfaces whose callbacks must not block (tray, hotkey listener)."""
        t = threading.Thread(target=self.dispatch, args=(uuid, event), daemon=True)
        t.start()
        return t
