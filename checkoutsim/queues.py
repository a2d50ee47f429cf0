# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Minimal discrete‑event primitives: Event and Env (the Future Event List
#   plus the simulated clock) used to drive one checkout run.
#
# Design notes:
#   - Events are tagged ("arrival" | "service_end" | "stop") and carry a small
#     data dict; Env hands every event to a single model.handle() hook.
#   - Equal timestamps fire in scheduling order (sequence number tie-break).
#   - Cancellation is lazy: the Event is the handle, cancel() flags it and the
#     run loop skips it when popped.
#
# Usage:
#   from checkoutsim.queues import Env, Event
#   env = Env(model); ev = env.schedule(1.5, "arrival"); env.cancel(ev)
# -----------------------------------------------------------------------------

from __future__ import annotations
import heapq
from typing import Any, List

ARRIVAL = "arrival"
SERVICE_END = "service_end"
STOP = "stop"

class Event:
    """Minimal event object for the Future Event List (FEL)."""
    __slots__ = ("t", "seq", "kind", "data", "cancelled", "fired")
    def __init__(self, t: float, seq: int, kind: str, data: dict):
        self.t = t; self.seq = seq; self.kind = kind; self.data = data
        self.cancelled = False
        self.fired = False
    def __lt__(self, other: "Event"):
        return (self.t, self.seq) < (other.t, other.seq)
    def __repr__(self):
        return f"Event(t={self.t:.4f}, kind={self.kind!r}, data={self.data!r})"

class Env:
    """Simulation environment holding the clock, FEL, and a model hook.

    Attributes
    ----------
    t : float
        Simulation time (seconds).
    FEL : list[Event]
        Min‑heap of scheduled events, ordered by (time, sequence).
    model : object
        Object with a handle(env, event) method; it receives every event.
    fired : int
        Number of events dispatched so far.
    """
    def __init__(self, model: Any):
        self.t: float = 0.0
        self.FEL: List[Event] = []
        self.model = model
        self.fired: int = 0
        self._seq: int = 0
        self._stop_requested = False

    @property
    def now(self) -> float:
        return self.t

    def schedule(self, delay: float, kind: str, **data) -> Event:
        """Schedule `kind` at now + delay and return the event as its cancel handle."""
        if delay < 0:
            raise ValueError(f"cannot schedule {kind!r} in the past (delay={delay})")
        self._seq += 1
        ev = Event(self.t + delay, self._seq, kind, data)
        heapq.heappush(self.FEL, ev)
        return ev

    def cancel(self, ev: Event | None):
        # Already fired or cancelled events are left alone
        if ev is None or ev.fired or ev.cancelled:
            return
        ev.cancelled = True

    def pending(self) -> int:
        return sum(1 for ev in self.FEL if not ev.cancelled)

    def stop(self):
        self._stop_requested = True

    def run(self):
        self._stop_requested = False
        while self.FEL and not self._stop_requested:
            ev = heapq.heappop(self.FEL)
            if ev.cancelled:
                continue
            self.t = ev.t
            ev.fired = True
            self.fired += 1
            self.model.handle(self, ev)
