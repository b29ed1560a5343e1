"""
Zerm: core contracts

Shared types for every layer:
- Probe      → CapabilityStatus
- Controller → RenderState
- Commander  → FocusContext / CommandResult

Zoom is the only source of truth. Nothing in here caches its state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# ============================================================
# Capabilities
# ============================================================

class Capability(str, Enum):
    MUTE = "MUTE"
    VIDEO = "VIDEO"
    SHARE = "SHARE"
    LEAVE = "LEAVE"
    FOCUS = "FOCUS"


class CapabilityStatus(str, Enum):
    """
    Result of one probe.

    NOT_RUNNING is a successful observation (Zoom is absent).
    UNKNOWN means the probe failed or could not read the menu.
    """
    ON = "ON"
    OFF = "OFF"
    NOT_IN_SESSION = "NOT_IN_SESSION"
    NOT_RUNNING = "NOT_RUNNING"
    UNKNOWN = "UNKNOWN"

    @property
    def inactive(self) -> bool:
        return self in (CapabilityStatus.NOT_IN_SESSION, CapabilityStatus.NOT_RUNNING)


# ============================================================
# Controller → Surface
# ============================================================

@dataclass(frozen=True)
class RenderState:
    """Title text plus binary visual state (0 | 1) for one button."""
    title: str
    visual_index: int

    def __post_init__(self) -> None:
        if self.visual_index not in (0, 1):
            raise ValueError(f"visual_index must be 0 or 1, got {self.visual_index!r}")


# ============================================================
# Commander
# ============================================================

@dataclass(frozen=True)
class FocusContext:
    """The application that was frontmost before a command started."""
    app_path: str


@dataclass(frozen=True)
class Shortcut:
    """
    A keyboard shortcut, e.g. Shortcut("a", ("cmd", "shift")).

    modifiers are pynput Key names.
    """
    key: str
    modifiers: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return "+".join(self.modifiers + (self.key,))


class CommandOutcome(str, Enum):
    SENT = "SENT"
    TARGET_ABSENT = "TARGET_ABSENT"   # expected no-op, not a failure
    SKIPPED = "SKIPPED"               # precondition not met, nothing sent
    FAILED = "FAILED"


@dataclass(frozen=True)
class CommandResult:
    outcome: CommandOutcome
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome != CommandOutcome.FAILED


# ============================================================
# Errors
# ============================================================

class ZermError(Exception):
    """Base class for errors raised inside Zerm."""


class ScriptError(ZermError):
    """The osascript primitive failed (spawn, non-zero exit, timeout)."""


class InjectionError(ZermError):
    """The keyboard shortcut could not be delivered."""


class CommandError(ZermError):
    """A command step failed. Caught by the Commander, never propagated past it."""
