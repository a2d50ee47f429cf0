# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Collect per-run KPIs (waits, queue length) and reduce a finished run into
#   an ExperimentResult: customers served, average wait, utilization and the
#   efficiency score used to rank cashier counts.
#
# Design notes:
#   - Keep side‑effect methods (note_*) for instrumentation from the model.
#   - summary() returns a JSON‑serializable dict of diagnostics; result()
#     returns the record the experiment runner collects.
#   - efficiency = utilization / (avg_wait + 1); the +1 keeps the score finite
#     when nobody waited.
#
# Usage:
#   M = Metrics(num_cashiers); ...; M.result(cashiers)
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List

@dataclass(frozen=True)
class ExperimentResult:
    num_cashiers: int
    total_customers: int
    avg_waiting_time: float
    utilization: float
    efficiency_score: float

    def as_dict(self) -> Dict:
        return asdict(self)

def efficiency_score(utilization: float, avg_waiting_time: float) -> float:
    return utilization / (avg_waiting_time + 1.0)

class Metrics:
    def __init__(self, num_cashiers: int):
        self.num_cashiers = num_cashiers
        self.wait_samples: List[float] = []    # one per completed customer
        self.service_samples: List[float] = []
        self.completed = 0
        self.max_queue_length = 0
        self.queued_at_horizon = 0

    def note_completion(self, customer):
        self.completed += 1
        self.wait_samples.append(customer.waiting_time)
        self.service_samples.append(customer.service_time)

    def note_queue_length(self, length: int):
        if length > self.max_queue_length:
            self.max_queue_length = length

    def note_horizon(self, queue_length: int):
        self.queued_at_horizon = queue_length

    def avg_waiting_time(self) -> float:
        if not self.wait_samples:
            return 0.0
        return sum(self.wait_samples) / len(self.wait_samples)

    @staticmethod
    def utilization(cashiers: Iterable) -> float:
        busy = idle = 0.0
        for c in cashiers:
            busy += c.total_service_time
            idle += c.total_idle_time
        denom = busy + idle
        return busy / denom if denom > 0 else 0.0

    def result(self, cashiers: Iterable) -> ExperimentResult:
        util = self.utilization(cashiers)
        avg_wait = self.avg_waiting_time()
        return ExperimentResult(
            num_cashiers=self.num_cashiers,
            total_customers=self.completed,
            avg_waiting_time=avg_wait,
            utilization=util,
            efficiency_score=efficiency_score(util, avg_wait),
        )

    def summary(self, cashiers: List) -> Dict:
        res = self.result(cashiers)
        avg_service = (
            sum(self.service_samples) / len(self.service_samples)
            if self.service_samples else 0.0
        )
        return {
            **res.as_dict(),
            "avg_service_time": avg_service,
            "max_wait": max(self.wait_samples) if self.wait_samples else 0.0,
            "max_queue_length": self.max_queue_length,
            "queued_at_horizon": self.queued_at_horizon,
            "cashier_utilization": {c.id: c.utilization() for c in cashiers},
        }
