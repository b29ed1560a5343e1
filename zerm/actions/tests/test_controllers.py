import pytest

from zerm.actions.zoom import FocusZoom, LeaveMeeting, MuteToggle, ShareScreenToggle, VideoToggle
from zerm.automation import scripts
from zerm.automation.commander import Commander
from zerm.automation.osascript import Notifier
from zerm.automation.probe import Probe
from zerm.core.config import CAPABILITIES, TargetApp, Timing
from zerm.core.types import (
    Capability, CapabilityStatus, CommandOutcome, InjectionError, RenderState, ScriptError,
)

SAFARI = "Macintosh HD:Applications:Safari.app:"
TARGET = TargetApp()
STATUS_SCRIPTS = {scripts.capability_status(TARGET, spec): cap for cap, spec in CAPABILITIES.items()}


class FakeZoom:
    """
    A tiny Zoom + System Events: answers status/focus scripts and
    flips its state when the right shortcut arrives while it is frontmost.
    """

    def __init__(self, running=True, in_meeting=True, muted=False, video=False, sharing=False):
        self.running = running
        self.in_meeting = in_meeting
        self.on = {Capability.MUTE: muted, Capability.VIDEO: video, Capability.SHARE: sharing}
        self.frontmost = SAFARI
        self.log = []            # ("probe", cap) / ("key", shortcut) / ...
        self.probe_fault = None
        self.ambiguous = False

    def __call__(self, script):
        cap = STATUS_SCRIPTS.get(script)
        if cap is not None:
            self.log.append(("probe", cap))
            if self.probe_fault is not None:
                raise self.probe_fault
            return self.status_token(cap)
        if script == scripts.frontmost_application():
            return self.frontmost
        if script == scripts.is_running(TARGET):
            return "true" if self.running else "false"
        if script.startswith("display notification"):
            self.log.append(("notify", script))
            return ""
        if script == scripts.activate(TARGET.application_name):
            self.log.append(("activate", "zoom"))
            self.frontmost = TARGET.application_name
            return ""
        if script == scripts.activate(SAFARI):
            self.log.append(("activate", "safari"))
            self.frontmost = SAFARI
            return ""
        raise AssertionError(f"unexpected script: {script}")

    def status_token(self, cap):
        if not self.running:
            return "not_running"
        if cap == Capability.FOCUS:
            return "on"
        if not self.in_meeting:
            return "not_in_session"
        if cap == Capability.LEAVE:
            return "on"
        if self.ambiguous:
            return "unknown"
        return "on" if self.on[cap] else "off"

    def key(self, shortcut):
        self.log.append(("key", str(shortcut)))
        if self.frontmost != TARGET.application_name:
            return
        for cap, spec in CAPABILITIES.items():
            if spec.shortcut == shortcut:
                if cap == Capability.LEAVE:
                    self.in_meeting = False
                else:
                    self.on[cap] = not self.on[cap]

    def events(self, kind):
        return [e for e in self.log if e[0] == kind]

    def probes_after_last_key(self):
        keys = [i for i, e in enumerate(self.log) if e[0] == "key"]
        start = keys[-1] + 1 if keys else 0
        return [e for e in self.log[start:] if e[0] == "probe"]


class FakeKeyboard:
    def __init__(self, zoom, fail=False):
        self.zoom = zoom
        self.fail = fail

    def send(self, shortcut):
        self.zoom.key(shortcut)
        if self.fail:
            raise InjectionError("injection refused")


def build(cls, zoom, keyboard_fail=False):
    sleeps = []
    probe = Probe(run=zoom, target=TARGET)
    commander = Commander(
        run=zoom,
        injector=FakeKeyboard(zoom, fail=keyboard_fail),
        notifier=Notifier(run=zoom),
        target=TARGET,
        timing=Timing(),
        sleep=sleeps.append,
    )
    return cls(probe, commander, sleep=sleeps.append), sleeps


# ------------------------------------------------------------
# scenarios
# ------------------------------------------------------------

def test_mute_toggle_in_meeting_currently_unmuted():
    zoom = FakeZoom(muted=False)
    mute, _ = build(MuteToggle, zoom)

    assert mute.refresh() == RenderState("Unmuted", 1)
    assert mute.activate() == RenderState("Muted", 0)
    assert zoom.events("key") == [("key", "cmd+shift+a")]
    assert zoom.frontmost == SAFARI


def test_share_toggle_when_zoom_not_running():
    zoom = FakeZoom(running=False)
    share, _ = build(ShareScreenToggle, zoom)

    assert share.activate() == RenderState("Share", 0)
    assert zoom.events("key") == []
    assert zoom.events("activate") == []
    assert len(zoom.events("notify")) == 1
    assert zoom.events("probe") == [("probe", Capability.SHARE)]


def test_video_toggle_on_and_off():
    zoom = FakeZoom(video=False)
    video, _ = build(VideoToggle, zoom)

    assert video.activate() == RenderState("Video On", 1)
    assert video.activate() == RenderState("Video Off", 0)


def test_refresh_when_probe_faults_shows_placeholder():
    zoom = FakeZoom()
    zoom.probe_fault = ScriptError("System Events got an error")
    mute, _ = build(MuteToggle, zoom)

    assert mute.refresh() == CAPABILITIES[Capability.MUTE].placeholder
    assert mute.refresh().title == "Zoom?"


def test_refresh_when_probe_is_ambiguous_shows_placeholder():
    zoom = FakeZoom()
    zoom.ambiguous = True
    share, _ = build(ShareScreenToggle, zoom)

    assert share.refresh() == RenderState("Share?", 0)


def test_refresh_not_in_meeting_renders_inactive_default():
    zoom = FakeZoom(in_meeting=False)
    mute, _ = build(MuteToggle, zoom)

    assert mute.refresh() == RenderState("Unmuted", 1)


@pytest.mark.parametrize("cls", [MuteToggle, VideoToggle, ShareScreenToggle, LeaveMeeting, FocusZoom])
def test_refresh_is_idempotent(cls):
    zoom = FakeZoom(muted=True, sharing=True)
    controller, _ = build(cls, zoom)

    assert controller.refresh() == controller.refresh()
    assert zoom.events("key") == []


# ------------------------------------------------------------
# reconciliation probe
# ------------------------------------------------------------

@pytest.mark.parametrize("cls", [MuteToggle, VideoToggle, ShareScreenToggle])
def test_activate_probes_exactly_once_after_successful_command(cls):
    zoom = FakeZoom()
    controller, _ = build(cls, zoom)

    controller.activate()

    assert len(zoom.events("key")) == 1
    assert zoom.probes_after_last_key() == [("probe", controller.capability)]


def test_activate_probes_exactly_once_after_failed_command():
    zoom = FakeZoom()
    mute, _ = build(MuteToggle, zoom, keyboard_fail=True)

    state = mute.activate()

    assert zoom.probes_after_last_key() == [("probe", Capability.MUTE)]
    # still whatever Zoom reports, never an assumption
    assert state in (RenderState("Muted", 0), RenderState("Unmuted", 1))
    assert zoom.frontmost == SAFARI


def test_activate_renders_what_zoom_reports_when_key_is_lost():
    zoom = FakeZoom(muted=False)
    mute, _ = build(MuteToggle, zoom)
    # Zoom ignores the shortcut (e.g. focus never arrived)
    zoom.key = lambda shortcut: zoom.log.append(("key", str(shortcut)))

    assert mute.activate() == RenderState("Unmuted", 1)


def test_activate_survives_a_raising_commander():
    zoom = FakeZoom(muted=True)
    mute, _ = build(MuteToggle, zoom)

    def boom(capability):
        raise RuntimeError("unexpected")

    mute.commander.execute = boom

    assert mute.activate() == RenderState("Muted", 0)
    assert zoom.events("probe") == [("probe", Capability.MUTE)]


def test_activate_with_probe_fault_shows_placeholder():
    zoom = FakeZoom()
    zoom.probe_fault = ScriptError("timeout")
    video, _ = build(VideoToggle, zoom)

    assert video.activate() == RenderState("Video?", 0)


# ------------------------------------------------------------
# leave / focus variants
# ------------------------------------------------------------

def test_leave_meeting_waits_before_reconciling():
    zoom = FakeZoom(in_meeting=True)
    leave, sleeps = build(LeaveMeeting, zoom)

    assert leave.refresh() == RenderState("Leave", 0)
    assert leave.activate() == RenderState("No Meeting", 1)
    assert zoom.events("key") == [("key", "cmd+w")]
    assert sleeps == [0.1, 0.2, 0.5]
    assert zoom.probes_after_last_key() == [("probe", Capability.LEAVE)]


def test_leave_meeting_sends_nothing_outside_a_meeting():
    zoom = FakeZoom(in_meeting=False)
    leave, sleeps = build(LeaveMeeting, zoom)

    assert leave.activate() == RenderState("No Meeting", 1)
    assert zoom.events("key") == []
    assert zoom.events("activate") == []
    assert sleeps == []


def test_leave_meeting_outside_a_meeting_is_skipped_not_absent():
    zoom = FakeZoom(in_meeting=False)
    leave, _ = build(LeaveMeeting, zoom)

    result = leave.command()

    assert result.outcome == CommandOutcome.SKIPPED
    assert result.detail == CapabilityStatus.NOT_IN_SESSION.value
    assert result.ok
    assert zoom.events("notify") == []


def test_focus_brings_zoom_forward():
    zoom = FakeZoom()
    focus, _ = build(FocusZoom, zoom)

    assert focus.activate() == RenderState("Focus Zoom", 0)
    assert zoom.frontmost == TARGET.application_name
    assert zoom.events("key") == []


def test_focus_without_zoom():
    zoom = FakeZoom(running=False)
    focus, _ = build(FocusZoom, zoom)

    assert focus.refresh() == RenderState("No Zoom", 1)
    assert focus.activate() == RenderState("No Zoom", 1)
    assert len(zoom.events("notify")) == 1


def test_render_is_total_for_every_controller():
    zoom = FakeZoom()
    for cls in (MuteToggle, VideoToggle, ShareScreenToggle, LeaveMeeting, FocusZoom):
        controller, _ = build(cls, zoom)
        for status in CapabilityStatus:
            assert controller.render(status).visual_index in (0, 1)
