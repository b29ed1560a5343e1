from __future__ import annotations

import time
from typing import Callable, Optional

from zerm.actions.zoom import CONTROLLER_TYPES
from zerm.automation.commander import Commander, Injector
from zerm.automation.osascript import Notifier, OsaScriptRunner, ScriptRunner
from zerm.automation.probe import Probe
from zerm.core.config import CAPABILITIES, DEFAULT_CONFIG, AppConfig
from zerm.runtime.host import HostAdapter


def build_adapter(
    config: AppConfig = DEFAULT_CONFIG,
    injector: Optional[Injector] = None,
    run: Optional[ScriptRunner] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> HostAdapter:
    """
    Wire one controller per capability into a HostAdapter.
    Controllers live for the whole process; nothing here needs teardown.
    """
    if run is None:
        run = OsaScriptRunner(timeout_s=config.timing.script_timeout_ms / 1000.0)
    if injector is None:
        from zerm.injector.keyboard import KeyboardInjector

        injector = KeyboardInjector.create()

    specs = dict(CAPABILITIES)
    probe = Probe(run=run, target=config.target, specs=specs)
    commander = Commander(
        run=run,
        injector=injector,
        notifier=Notifier(run=run, title=config.target.notification_title),
        target=config.target,
        timing=config.timing,
        specs=specs,
        sleep=sleep,
    )

    adapter = HostAdapter()
    for cls in CONTROLLER_TYPES:
        adapter.register(cls(probe, commander, specs[cls.capability], sleep=sleep))
    return adapter
