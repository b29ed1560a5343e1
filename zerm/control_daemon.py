from __future__ import annotations

import argparse
import logging
import threading
import time
from pathlib import Path

from zerm.core.config import load_settings
from zerm.runtime.registry import build_adapter

logger = logging.getLogger("zerm")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Zerm: Zoom controls without focusing Zoom")
    parser.add_argument("--no-tray", action="store_true", help="Do not show the tray menu")
    parser.add_argument("--no-hotkeys", action="store_true", help="Do not listen for global hotkeys")
    parser.add_argument("--settings", type=Path, default=None,
                        help="Settings JSON (default: ~/.config/zerm/settings.json)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[Zerm] %(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_settings(args.settings)
    adapter = build_adapter(config)
    stop = threading.Event()

    logger.info("Control daemon started for %s.", config.target.display_name)

    if not args.no_hotkeys:
        try:
            from zerm.ui.hotkeys import run_hotkeys
        except Exception as e:
            logger.warning("Hotkeys unavailable: %s", e)
        else:
            # Hotkeys never depend on the tray
            threading.Thread(target=run_hotkeys, args=(adapter,), daemon=True).start()
            logger.info("Hotkeys: Ctrl+Alt+M/V/S/L/F = mute / video / share / leave / focus")

    if not args.no_tray:
        try:
            from zerm.ui.tray import run_tray
        except Exception as e:
            logger.warning("Tray unavailable (%s). Hotkeys only.", e)
        else:
            # pystray wants the main thread on macOS
            run_tray(adapter, stop)
            return

    try:
        while not stop.is_set():
            time.sleep(0.5)
    except KeyboardInterrupt:
        stop.set()
        logger.info("exiting")


if __name__ == "__main__":
    main()
