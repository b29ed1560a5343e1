"""
Zerm defaults

Timings, target application and the per-capability table
(menu labels, shortcut, render mapping, Stream Deck action UUID).

Optional overrides live in ~/.config/zerm/settings.json:

    {"timing": {"pre_input_settle_ms": 150}, "target": {"process_name": "zoom.us"}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

from zerm.core.types import Capability, CapabilityStatus, RenderState, Shortcut

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Timing:
    pre_input_settle_ms: int = 100    # Zoom window/menu settles after activate
    post_input_settle_ms: int = 200   # shortcut lands before focus goes back
    leave_confirm_ms: int = 500       # meeting teardown is slower than a toggle
    script_timeout_ms: int = 10_000


@dataclass(frozen=True)
class TargetApp:
    process_name: str = "zoom.us"
    application_name: str = "zoom.us"
    session_menu: str = "Meeting"
    display_name: str = "Zoom"
    notification_title: str = "Stream Deck"


@dataclass(frozen=True)
class RenderMap:
    """
    Total mapping CapabilityStatus → RenderState.

    NOT_IN_SESSION and NOT_RUNNING both render as `inactive`.
    """
    on: RenderState
    off: RenderState
    inactive: RenderState
    unknown: RenderState

    def for_status(self, status: CapabilityStatus) -> RenderState:
        if status == CapabilityStatus.ON:
            return self.on
        if status == CapabilityStatus.OFF:
            return self.off
        if status.inactive:
            return self.inactive
        return self.unknown


@dataclass(frozen=True)
class CapabilitySpec:
    capability: Capability
    action_uuid: str
    render: RenderMap
    shortcut: Optional[Shortcut] = None
    on_label: Optional[str] = None     # menu item shown while the capability is ON
    off_label: Optional[str] = None    # menu item shown while it is OFF
    requires_session: bool = True

    @property
    def placeholder(self) -> RenderState:
        return self.render.unknown


@dataclass(frozen=True)
class AppConfig:
    timing: Timing = Timing()
    target: TargetApp = TargetApp()


DEFAULT_CONFIG = AppConfig()

_UUID_PREFIX = "com.max-beizer.zerm"


MUTE_SPEC = CapabilitySpec(
    capability=Capability.MUTE,
    action_uuid=f"{_UUID_PREFIX}.zoom-mute-toggle",
    shortcut=Shortcut("a", ("cmd", "shift")),
    on_label="Unmute audio",
    off_label="Mute audio",
    render=RenderMap(
        on=RenderState("Muted", 0),
        off=RenderState("Unmuted", 1),
        inactive=RenderState("Unmuted", 1),
        unknown=RenderState("Zoom?", 1),
    ),
)

VIDEO_SPEC = CapabilitySpec(
    capability=Capability.VIDEO,
    action_uuid=f"{_UUID_PREFIX}.zoom-video-toggle",
    shortcut=Shortcut("v", ("cmd", "shift")),
    on_label="Stop Video",
    off_label="Start Video",
    render=RenderMap(
        on=RenderState("Video On", 1),
        off=RenderState("Video Off", 0),
        inactive=RenderState("Video Off", 0),
        unknown=RenderState("Video?", 0),
    ),
)

SHARE_SPEC = CapabilitySpec(
    capability=Capability.SHARE,
    action_uuid=f"{_UUID_PREFIX}.zoom-share-screen",
    shortcut=Shortcut("s", ("cmd", "shift")),
    on_label="Stop Share",
    off_label="Start Share",
    render=RenderMap(
        on=RenderState("Stop Share", 1),
        off=RenderState("Share", 0),
        inactive=RenderState("Share", 0),
        unknown=RenderState("Share?", 0),
    ),
)

# ON = in a meeting. No labels: the Meeting menu itself is the signal.
LEAVE_SPEC = CapabilitySpec(
    capability=Capability.LEAVE,
    action_uuid=f"{_UUID_PREFIX}.zoom-leave-meeting",
    shortcut=Shortcut("w", ("cmd",)),
    render=RenderMap(
        on=RenderState("Leave", 0),
        off=RenderState("No Meeting", 1),
        inactive=RenderState("No Meeting", 1),
        unknown=RenderState("Leave?", 1),
    ),
)

# ON = Zoom is running. Focus has nothing to toggle and no shortcut.
FOCUS_SPEC = CapabilitySpec(
    capability=Capability.FOCUS,
    action_uuid=f"{_UUID_PREFIX}.zoom-focus",
    requires_session=False,
    render=RenderMap(
        on=RenderState("Focus Zoom", 0),
        off=RenderState("Focus Zoom", 0),
        inactive=RenderState("No Zoom", 1),
        unknown=RenderState("Zoom?", 1),
    ),
)

CAPABILITIES: Dict[Capability, CapabilitySpec] = {
    Capability.MUTE: MUTE_SPEC,
    Capability.VIDEO: VIDEO_SPEC,
    Capability.SHARE: SHARE_SPEC,
    Capability.LEAVE: LEAVE_SPEC,
    Capability.FOCUS: FOCUS_SPEC,
}


# ------------------------------------------------------------
# Settings overrides
# ------------------------------------------------------------

def settings_path() -> Path:
    return Path.home() / ".config" / "zerm" / "settings.json"


def _overlay(base, values: Mapping):
    known = {f.name for f in fields(base)}
    changes = {}
    for key, value in values.items():
        if key not in known:
            logger.warning("Ignoring unknown setting %r", key)
            continue
        current = getattr(base, key)
        coerced = type(current)(value)
        if key == "script_timeout_ms" and coerced <= 0:
            raise ValueError(f"{key} must be positive, got {value!r}")
        if key.endswith("_ms") and coerced < 0:
            raise ValueError(f"{key} must not be negative, got {value!r}")
        changes[key] = coerced
    return replace(base, **changes)


def apply_overrides(config: AppConfig, data: Mapping) -> AppConfig:
    timing = _overlay(config.timing, data.get("timing") or {})
    target = _overlay(config.target, data.get("target") or {})
    return replace(config, timing=timing, target=target)


def load_settings(path: Optional[Path] = None) -> AppConfig:
    """
    DEFAULT_CONFIG with any overrides from the settings file applied.
    A missing file is normal; a broken one is logged and ignored.
    """
    p = path or settings_path()
    if not p.exists():
        return DEFAULT_CONFIG
    try:
        data = json.loads(p.read_text())
        if not isinstance(data, dict):
            raise ValueError("settings root must be an object")
        return apply_overrides(DEFAULT_CONFIG, data)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Could not load settings from %s: %s", p, e)
        return DEFAULT_CONFIG
