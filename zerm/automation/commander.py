from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, Optional, Protocol

from zerm.automation import scripts
from zerm.automation.osascript import Notifier, ScriptRunner
from zerm.core.config import CAPABILITIES, CapabilitySpec, TargetApp, Timing
from zerm.core.types import (
    Capability,
    CommandError, CommandOutcome, CommandResult,
    FocusContext, InjectionError, ScriptError, Shortcut,
)

logger = logging.getLogger(__name__)


class Injector(Protocol):
    def send(self, shortcut: Shortcut) -> None: ...


@dataclass
class Commander:
    """
    Changes Zoom's state by sending its keyboard shortcut.

    Zoom has no API, so the only channel is keystrokes to the frontmost app:
      1. remember the frontmost app
      2. bail out (with a notification) if Zoom is not running
      3. activate Zoom, settle
      4. send the shortcut
      5. settle, put the original app back in front

    Step 5's restore runs on every exit after step 3 started.
    Nothing here raises for an external failure; the result says what happened.
    """
    run: ScriptRunner
    injector: Injector
    notifier: Notifier
    target: TargetApp = TargetApp()
    timing: Timing = Timing()
    specs: Dict[Capability, CapabilitySpec] = field(default_factory=lambda: dict(CAPABILITIES))
    sleep: Callable[[float], None] = time.sleep

    # ------------------------------------------------------------
    # focus bracket
    # ------------------------------------------------------------

    def capture_focus(self) -> Optional[FocusContext]:
        try:
            path = self.run(scripts.frontmost_application())
        except ScriptError as e:
            logger.warning("Could not read frontmost application: %s", e)
            return None
        except Exception:
            logger.exception("Could not read frontmost application")
            return None
        return FocusContext(app_path=path) if path else None

    def restore_focus(self, context: Optional[FocusContext]) -> bool:
        if context is None:
            logger.debug("No focus context captured; leaving %s in front", self.target.display_name)
            return False
        try:
            self.run(scripts.activate(context.app_path))
        except ScriptError as e:
            logger.warning("Could not restore focus to %s: %s", context.app_path, e)
            return False
        except Exception:
            logger.exception("Could not restore focus to %s", context.app_path)
            return False
        return True

    @contextmanager
    def preserve_focus(self, context: Optional[FocusContext]) -> Iterator[None]:
        try:
            yield
        finally:
            self.restore_focus(context)

    # ------------------------------------------------------------
    # steps
    # ------------------------------------------------------------

    def target_running(self) -> bool:
        """Raises CommandError when the presence check itself fails."""
        try:
            return self.run(scripts.is_running(self.target)).strip().lower() == "true"
        except ScriptError as e:
            raise CommandError(f"could not check for {self.target.display_name}: {e}") from e

    def _bring_forward(self) -> None:
        try:
            self.run(scripts.activate(self.target.application_name))
        except ScriptError as e:
            raise CommandError(f"could not activate {self.target.display_name}: {e}") from e

    def _absent(self, capability: Capability) -> CommandResult:
        logger.info("%s: %s is not running, nothing sent", capability.value, self.target.display_name)
        self.notifier.notify(f"{self.target.display_name} is not running")
        return CommandResult(CommandOutcome.TARGET_ABSENT)

    # ------------------------------------------------------------
    # commands
    # ------------------------------------------------------------

    def execute(self, capability: Capability) -> CommandResult:
        spec = self.specs[capability]
        if spec.shortcut is None:
            logger.error("%s has no shortcut to send", capability.value)
            return CommandResult(CommandOutcome.FAILED, "no shortcut")

        previous = self.capture_focus()

        try:
            running = self.target_running()
        except CommandError as e:
            logger.warning("%s: %s", capability.value, e)
            return CommandResult(CommandOutcome.FAILED, str(e))
        except Exception as e:
            logger.exception("%s: presence check failed", capability.value)
            return CommandResult(CommandOutcome.FAILED, str(e))
        if not running:
            return self._absent(capability)

        try:
            with self.preserve_focus(previous):
                self._bring_forward()
                self.sleep(self.timing.pre_input_settle_ms / 1000.0)
                self.injector.send(spec.shortcut)
                self.sleep(self.timing.post_input_settle_ms / 1000.0)
        except (CommandError, InjectionError) as e:
            logger.warning("%s command failed: %s", capability.value, e)
            return CommandResult(CommandOutcome.FAILED, str(e))
        except Exception as e:
            logger.exception("%s command failed", capability.value)
            return CommandResult(CommandOutcome.FAILED, str(e))

        logger.info("%s: sent %s to %s", capability.value, spec.shortcut, self.target.display_name)
        return CommandResult(CommandOutcome.SENT)

    def raise_to_front(self) -> CommandResult:
        """Bring Zoom forward and leave it there."""
        try:
            if not self.target_running():
                return self._absent(Capability.FOCUS)
            self._bring_forward()
        except CommandError as e:
            logger.warning("%s: %s", Capability.FOCUS.value, e)
            return CommandResult(CommandOutcome.FAILED, str(e))
        except Exception as e:
            logger.exception("%s: could not raise %s", Capability.FOCUS.value, self.target.display_name)
            return CommandResult(CommandOutcome.FAILED, str(e))
        logger.info("%s: %s brought to front", Capability.FOCUS.value, self.target.display_name)
        return CommandResult(CommandOutcome.SENT)
