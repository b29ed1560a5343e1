"""
AppleScript builders.

Pure functions: same inputs, same script text. The probe and commander
only ever talk to Zoom through these.

Status script tokens (one line on stdout):
    not_running | not_in_session | on | off | unknown
"""

from __future__ import annotations

from zerm.core.config import CapabilitySpec, TargetApp

NOT_RUNNING = "not_running"
NOT_IN_SESSION = "not_in_session"
ON = "on"
OFF = "off"
UNKNOWN = "unknown"


def quote(text: str) -> str:
    """AppleScript string literal."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _menu_item(label: str, menu: str) -> str:
    return f"menu item {quote(label)} of menu 1 of menu bar item {quote(menu)} of menu bar 1"


def capability_status(target: TargetApp, spec: CapabilitySpec) -> str:
    """
    Read one capability from Zoom's menu bar without touching focus.

    Tiers, in order: process present, session menu present,
    which of the two complementary labels is exposed.
    """
    process = quote(target.process_name)
    menu = target.session_menu
    lines = [
        'tell application "System Events"',
        f"  if not (exists (process {process})) then",
        f'    return "{NOT_RUNNING}"',
        "  end if",
        f"  tell process {process}",
    ]
    if spec.requires_session:
        lines += [
            f"    if not (exists menu bar item {quote(menu)} of menu bar 1) then",
            f'      return "{NOT_IN_SESSION}"',
            "    end if",
        ]
    if spec.off_label and spec.on_label:
        lines += [
            f"    if (exists {_menu_item(spec.off_label, menu)}) then",
            f'      return "{OFF}"',
            f"    else if (exists {_menu_item(spec.on_label, menu)}) then",
            f'      return "{ON}"',
            "    end if",
            f'    return "{UNKNOWN}"',
        ]
    else:
        lines.append(f'    return "{ON}"')
    lines += [
        "  end tell",
        "end tell",
    ]
    return "\n".join(lines)


def is_running(target: TargetApp) -> str:
    """Prints "true" or "false"."""
    return (
        'tell application "System Events" to return '
        f"(exists (process {quote(target.process_name)})) as text"
    )


def frontmost_application() -> str:
    return "return (path to frontmost application as text)"


def activate(application: str) -> str:
    return f"tell application {quote(application)} to activate"


def notification(message: str, title: str) -> str:
    return f"display notification {quote(message)} with title {quote(title)}"
