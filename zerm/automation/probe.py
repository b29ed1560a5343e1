from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict

from zerm.automation import scripts
from zerm.automation.osascript import ScriptRunner
from zerm.core.config import CAPABILITIES, CapabilitySpec, TargetApp
from zerm.core.types import Capability, CapabilityStatus, ScriptError

logger = logging.getLogger(__name__)

_TOKENS = {
    scripts.ON: CapabilityStatus.ON,
    scripts.OFF: CapabilityStatus.OFF,
    scripts.NOT_IN_SESSION: CapabilityStatus.NOT_IN_SESSION,
    scripts.NOT_RUNNING: CapabilityStatus.NOT_RUNNING,
}


@dataclass
class Probe:
    """
    Reads Zoom's live status for one capability. Never changes focus.

    probe() is total: every runner outcome, including exceptions,
    becomes a CapabilityStatus.
    """
    run: ScriptRunner
    target: TargetApp = TargetApp()
    specs: Dict[Capability, CapabilitySpec] = field(default_factory=lambda: dict(CAPABILITIES))

    def probe(self, capability: Capability) -> CapabilityStatus:
        spec = self.specs[capability]
        try:
            output = self.run(scripts.capability_status(self.target, spec))
        except ScriptError as e:
            logger.warning("%s probe failed: %s", capability.value, e)
            return CapabilityStatus.UNKNOWN
        except Exception:
            logger.exception("%s probe raised unexpectedly", capability.value)
            return CapabilityStatus.UNKNOWN

        token = (output or "").strip().lower()
        status = _TOKENS.get(token)
        if status is None:
            # transient menu state, e.g. mid-toggle
            logger.warning("%s probe ambiguous: %r", capability.value, output)
            return CapabilityStatus.UNKNOWN

        if status == CapabilityStatus.NOT_RUNNING:
            logger.info("%s: %s is not running", capability.value, self.target.display_name)
        elif status == CapabilityStatus.NOT_IN_SESSION:
            logger.info("%s: %s is running but not in a meeting", capability.value, self.target.display_name)
        else:
            logger.debug("%s: %s", capability.value, status.value)
        return status
