"""
The five Zoom buttons.

Mute / video / share are plain toggles. Leave waits for the meeting to
tear down before reading Zoom again. Focus has nothing to toggle: it only
brings Zoom to the front and shows whether there is anything to focus.
"""

from __future__ import annotations

import logging

from zerm.actions.controller import CapabilityController
from zerm.core.types import Capability, CapabilityStatus, CommandOutcome, CommandResult

logger = logging.getLogger(__name__)


class MuteToggle(CapabilityController):
    capability = Capability.MUTE


class VideoToggle(CapabilityController):
    capability = Capability.VIDEO


class ShareScreenToggle(CapabilityController):
    capability = Capability.SHARE


class LeaveMeeting(CapabilityController):
    capability = Capability.LEAVE

    def command(self) -> CommandResult:
        # Cmd+W outside a meeting closes whatever Zoom window is in front
        status = self.probe.probe(self.capability)
        if status != CapabilityStatus.ON:
            logger.info("LEAVE: not in a meeting (%s), nothing sent", status.value)
            return CommandResult(CommandOutcome.SKIPPED, status.value)

        result = self.commander.execute(self.capability)
        if result.outcome == CommandOutcome.SENT:
            self.sleep(self.commander.timing.leave_confirm_ms / 1000.0)
        return result


class FocusZoom(CapabilityController):
    capability = Capability.FOCUS

    def command(self) -> CommandResult:
        return self.commander.raise_to_front()


CONTROLLER_TYPES = (MuteToggle, VideoToggle, ShareScreenToggle, LeaveMeeting, FocusZoom)
