# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Entity definitions for the checkout DES: Customer and Cashier.
#   Customers carry their timestamps; Cashiers carry the Idle/Busy state
#   machine and the busy/idle time accumulators used for utilization.
#
# Design notes:
#   - A cashier's "first activity" is detected by last_activity_time == 0, so
#     the whole [0, now) interval counts as idle. A customer arriving at t=0
#     takes the same branch and adds 0.
#   - Illegal transitions raise InvalidStateError; the model decides whether
#     that aborts the run or is logged and skipped.
#
# Usage:
#   from checkoutsim.entities import Customer, Cashier
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from .errors import InvalidStateError

@dataclass
class Customer:
    id: int
    arrival_time: float
    service_start_time: Optional[float] = None
    service_end_time: Optional[float] = None

    @property
    def waiting_time(self) -> float:
        if self.service_start_time is None:
            return 0.0
        return self.service_start_time - self.arrival_time

    @property
    def service_time(self) -> float:
        if self.service_start_time is None or self.service_end_time is None:
            return 0.0
        return self.service_end_time - self.service_start_time

@dataclass
class Cashier:
    id: int
    busy: bool = False
    current: Optional[Customer] = None
    total_service_time: float = 0.0
    total_idle_time: float = 0.0
    last_idle_time: float = 0.0
    last_activity_time: float = 0.0

    def _idle_since_last_activity(self, now: float) -> float:
        if self.last_activity_time > 0:
            return now - self.last_activity_time
        # Never used yet: idle from time zero
        return now

    def start_service(self, customer: Customer, now: float) -> None:
        if self.busy:
            raise InvalidStateError(self.id, "already busy")
        idle = self._idle_since_last_activity(now)
        self.total_idle_time += idle
        self.last_idle_time = idle
        self.busy = True
        self.current = customer
        customer.service_start_time = now
        self.last_activity_time = now

    def end_service(self, now: float) -> Customer:
        """
        Finish the customer in service and return it to the caller, who decides
        where the cashier goes next.
        """
        if not self.busy:
            raise InvalidStateError(self.id, "not busy")
        if self.current is None:
            # Recover to Idle before reporting the broken invariant
            self.busy = False
            raise InvalidStateError(self.id, "busy without a customer")
        cust = self.current
        self.total_service_time += now - cust.service_start_time
        cust.service_end_time = now
        self.current = None
        self.busy = False
        self.last_activity_time = now
        return cust

    def finalize_idle_time(self, now: float) -> None:
        """Close the trailing idle interval of a cashier left Idle at the horizon."""
        if self.busy:
            raise InvalidStateError(self.id, "cannot finalize idle time while busy")
        self.total_idle_time += self._idle_since_last_activity(now)

    def utilization(self) -> float:
        total = self.total_service_time + self.total_idle_time
        return self.total_service_time / total if total > 0 else 0.0
