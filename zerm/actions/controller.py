from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from zerm.automation.commander import Commander
from zerm.automation.probe import Probe
from zerm.core.config import CAPABILITIES, CapabilitySpec
from zerm.core.types import Capability, CapabilityStatus, CommandResult, RenderState

logger = logging.getLogger(__name__)


class CapabilityController:
    """
    One button, one capability.

    Holds collaborators only, never a status. Every lifecycle call asks Zoom
    again, so nothing can go stale when Zoom changes on its own:

        refresh():  probe → render
        activate(): command → probe → render

    Neither method raises. The worst case is the capability's placeholder title.
    """

    capability: Capability

    def __init__(
        self,
        probe: Probe,
        commander: Commander,
        spec: Optional[CapabilitySpec] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.probe = probe
        self.commander = commander
        self.spec = spec or CAPABILITIES[self.capability]
        self.sleep = sleep

    @property
    def action_uuid(self) -> str:
        return self.spec.action_uuid

    def render(self, status: CapabilityStatus) -> RenderState:
        return self.spec.render.for_status(status)

    def refresh(self) -> RenderState:
        try:
            return self.render(self.probe.probe(self.capability))
        except Exception:
            logger.exception("%s refresh failed", self.capability.value)
            return self.spec.placeholder

    def activate(self) -> RenderState:
        try:
            result = self.command()
            logger.debug("%s command: %s", self.capability.value, result.outcome.value)
        except Exception:
            # the reconciliation probe below still decides what to show
            logger.exception("%s command raised", self.capability.value)

        try:
            return self.render(self.probe.probe(self.capability))
        except Exception:
            logger.exception("%s reconcile failed", self.capability.value)
            return self.spec.placeholder

    def command(self) -> CommandResult:
        return self.commander.execute(self.capability)
