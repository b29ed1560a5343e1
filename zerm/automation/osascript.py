from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable

from zerm.automation import scripts
from zerm.core.types import ScriptError

logger = logging.getLogger(__name__)

ScriptRunner = Callable[[str], str]


@dataclass
class OsaScriptRunner:
    """
    The one outbound primitive: run an AppleScript, return stripped stdout.
    Raises ScriptError on spawn failure, non-zero exit, timeout or
    output that is not UTF-8.
    """
    timeout_s: float = 10.0
    executable: str = "osascript"

    def __call__(self, script: str) -> str:
        try:
            result = subprocess.run(
                [self.executable, "-e", script],
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
            )
        except subprocess.TimeoutExpired as e:
            raise ScriptError(f"osascript timed out after {self.timeout_s:.1f}s") from e
        except OSError as e:
            raise ScriptError(f"could not start {self.executable}: {e}") from e
        except UnicodeDecodeError as e:
            raise ScriptError(f"{self.executable} wrote undecodable output: {e}") from e

        if result.returncode != 0:
            raise ScriptError(
                f"osascript exited {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout.strip()


@dataclass
class Notifier:
    """Fire-and-forget OS notification. Failures are logged and dropped."""
    run: ScriptRunner
    title: str = "Stream Deck"

    def notify(self, message: str) -> None:
        try:
            self.run(scripts.notification(message, self.title))
        except ScriptError as e:
            logger.warning("Notification %r not shown: %s", message, e)
        except Exception:
            logger.exception("Notification %r not shown", message)
