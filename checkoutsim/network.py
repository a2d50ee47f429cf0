# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# network.py
# -----------------------------------------------------------------------------
# Purpose:
#   The checkout line model: one shared FIFO waiting line in front of c
#   identical cashiers. Decides where a customer goes on arrival and what a
#   cashier does after each service completion, and tears the run down at
#   the horizon.
#
# Design notes:
#   - Env dispatches every event to Supermarket.handle(); handlers are
#     on_arrival / on_service_end / on_stop.
#   - First-fit assignment: the lowest-id idle cashier takes a new arrival.
#   - Arrivals are never scheduled at or past the horizon, so the stop event
#     only has to cancel the last pending arrival and in-flight services.
#   - strict=True lets InvalidStateError propagate; strict=False prints a
#     [warn] line, counts the violation and keeps going.
#
# Usage:
#   model = Supermarket(num_cashiers=3, arrivals=src_a, services=src_s, horizon=1000.0)
#   env = Env(model); model.start(env); env.run(); model.reconcile(env)
# -----------------------------------------------------------------------------

from __future__ import annotations
import sys
from collections import deque
from typing import Deque, List, Optional
from .config import require_positive, require_positive_int
from .entities import Customer, Cashier
from .errors import InvalidStateError
from .metrics import Metrics
from .queues import Env, Event, ARRIVAL, SERVICE_END, STOP

RUNNING = "running"
STOPPING = "stopping"
STOPPED = "stopped"

class Supermarket:
    def __init__(self, num_cashiers: int, arrivals, services, horizon: float, strict: bool = True):
        num_cashiers = require_positive_int(num_cashiers, "num_cashiers")
        horizon = require_positive(horizon, "horizon")
        self.cashiers: List[Cashier] = [Cashier(i) for i in range(num_cashiers)]
        self.queue: Deque[Customer] = deque()
        self.completed: List[Customer] = []
        self.arrivals = arrivals
        self.services = services
        self.horizon = float(horizon)
        self.strict = strict
        self.M = Metrics(num_cashiers)
        self.state = RUNNING
        self.invalid_states = 0
        self._next_id = 0
        self._next_arrival: Optional[Event] = None
        self._service_end: List[Optional[Event]] = [None] * num_cashiers

    # Kick off: first arrival plus the terminal stop event
    def start(self, env: Env):
        self.state = RUNNING
        env.schedule(self.horizon, STOP)
        self._schedule_next_arrival(env)

    def handle(self, env: Env, ev: Event):
        if ev.kind == ARRIVAL:
            self.on_arrival(env)
        elif ev.kind == SERVICE_END:
            self.on_service_end(env, ev.data["cashier_id"])
        elif ev.kind == STOP:
            self.on_stop(env)
        else:
            raise ValueError(f"unknown event kind {ev.kind!r}")

    def on_arrival(self, env: Env):
        if self.state != RUNNING:
            return
        cust = Customer(self._next_id, env.t)
        self._next_id += 1
        cashier = self._first_idle()
        if cashier is not None:
            self._begin(env, cashier, cust)
        else:
            self.queue.append(cust)
            self.M.note_queue_length(len(self.queue))
        self._schedule_next_arrival(env)

    def on_service_end(self, env: Env, cashier_id: int):
        if self.state != RUNNING:
            return
        cashier = self.cashiers[cashier_id]
        self._service_end[cashier_id] = None
        cust = self._guard(cashier.end_service, env.t)
        if cust is None:
            return
        self._complete(cust)
        if self.queue:
            # Same cashier takes the head of the line with no idle gap
            self._begin(env, cashier, self.queue.popleft(), from_queue=True)

    def on_stop(self, env: Env):
        if self.state != RUNNING:
            return
        self.state = STOPPING
        env.cancel(self._next_arrival)
        self._next_arrival = None
        for i, ev in enumerate(self._service_end):
            env.cancel(ev)
            self._service_end[i] = None
        self.state = STOPPED
        env.stop()

    def reconcile(self, env: Env):
        """
        Close the books at the horizon: busy cashiers finish their customer
        now (counted like any other completion), idle ones close their
        trailing idle interval.
        """
        now = self.horizon
        for cashier in self.cashiers:
            if cashier.busy:
                cust = self._guard(cashier.end_service, now)
                if cust is not None:
                    self._complete(cust)
            else:
                self._guard(cashier.finalize_idle_time, now)
        self.M.note_horizon(len(self.queue))

    def result(self):
        return self.M.result(self.cashiers)

    # --- helpers -------------------------------------------------------------
    def _first_idle(self) -> Optional[Cashier]:
        for cashier in self.cashiers:
            if not cashier.busy:
                return cashier
        return None

    def _begin(self, env: Env, cashier: Cashier, cust: Customer, from_queue: bool = False):
        try:
            cashier.start_service(cust, env.t)
        except InvalidStateError as exc:
            if self.strict:
                raise
            self._violation(exc)
            # A customer taken from the head goes back to the head; a new
            # arrival joins the tail
            if from_queue:
                self.queue.appendleft(cust)
            else:
                self.queue.append(cust)
                self.M.note_queue_length(len(self.queue))
            return
        duration = self.services.sample()
        self._service_end[cashier.id] = env.schedule(duration, SERVICE_END, cashier_id=cashier.id)

    def _complete(self, cust: Customer):
        self.completed.append(cust)
        self.M.note_completion(cust)

    def _schedule_next_arrival(self, env: Env):
        gap = self.arrivals.sample()
        if env.t + gap < self.horizon:
            self._next_arrival = env.schedule(gap, ARRIVAL)
        else:
            self._next_arrival = None

    def _guard(self, transition, *args):
        try:
            return transition(*args)
        except InvalidStateError as exc:
            if self.strict:
                raise
            self._violation(exc)
            return None

    def _violation(self, exc: InvalidStateError):
        self.invalid_states += 1
        self._warn(str(exc))

    @staticmethod
    def _warn(msg: str):
        print(f"[warn] {msg}", file=sys.stderr)
