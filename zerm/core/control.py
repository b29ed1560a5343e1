from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock
from typing import Iterator


@dataclass
class ActionGate:
    """
    Per-action serialisation.
    One event for an action runs to completion (probe, command, probe)
    before the next one for the same action starts.
    Different actions never share a gate.
    """
    uuid: str
    _lock: Lock = field(default_factory=Lock, repr=False)

    @contextmanager
    def hold(self) -> Iterator[None]:
        with self._lock:
            yield
