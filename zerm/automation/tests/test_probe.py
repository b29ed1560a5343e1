import pytest

from zerm.automation import scripts
from zerm.automation.probe import Probe
from zerm.core.config import LEAVE_SPEC, MUTE_SPEC, FOCUS_SPEC, TargetApp
from zerm.core.types import Capability, CapabilityStatus, ScriptError


class FakeRunner:
    def __init__(self, reply):
        self.reply = reply
        self.scripts = []

    def __call__(self, script):
        self.scripts.append(script)
        if isinstance(self.reply, BaseException):
            raise self.reply
        return self.reply


@pytest.mark.parametrize("reply, expected", [
    ("on", CapabilityStatus.ON),
    ("off", CapabilityStatus.OFF),
    ("unknown", CapabilityStatus.UNKNOWN),
    ("not_running", CapabilityStatus.NOT_RUNNING),
    ("not_in_session", CapabilityStatus.NOT_IN_SESSION),
    (ScriptError("osascript exited 1"), CapabilityStatus.UNKNOWN),
])
def test_probe_outcomes(reply, expected):
    probe = Probe(run=FakeRunner(reply))
    assert probe.probe(Capability.MUTE) == expected


@pytest.mark.parametrize("reply", ["", "garbage", "Muted", RuntimeError("boom"), OSError("no osascript")])
def test_probe_never_raises(reply):
    probe = Probe(run=FakeRunner(reply))
    assert probe.probe(Capability.VIDEO) == CapabilityStatus.UNKNOWN


def test_probe_tolerates_whitespace_and_case():
    probe = Probe(run=FakeRunner("  ON\n"))
    assert probe.probe(Capability.SHARE) == CapabilityStatus.ON


def test_probe_sends_the_capability_script():
    run = FakeRunner("off")
    target = TargetApp()
    Probe(run=run, target=target).probe(Capability.MUTE)
    assert run.scripts == [scripts.capability_status(target, MUTE_SPEC)]


def test_status_script_checks_tiers_in_order():
    s = scripts.capability_status(TargetApp(), MUTE_SPEC)
    assert s.index("not_running") < s.index("not_in_session") < s.index('"Mute audio"') < s.index('"Unmute audio"')
    # off label is checked first
    assert s.index('return "off"') < s.index('return "on"')


def test_status_script_without_labels_reports_on():
    leave = scripts.capability_status(TargetApp(), LEAVE_SPEC)
    assert "not_in_session" in leave and 'return "on"' in leave and "unknown" not in leave

    focus = scripts.capability_status(TargetApp(), FOCUS_SPEC)
    assert "not_in_session" not in focus and 'return "on"' in focus


def test_quote_escapes_applescript_literals():
    assert scripts.quote('say "hi"') == '"say \\"hi\\""'
    assert scripts.quote("a\\b") == '"a\\\\b"'
