"""
checkoutsim package initializer.

This package contains the discrete-event engine (event list and clock),
the customer/cashier entities, the shared-line checkout model, metric
collection and the staffing policy used to size an M/M/c supermarket
checkout.
"""
__all__ = [
    "entities", "errors", "queues", "network",
    "arrivals", "policies", "metrics", "simulation", "config",
]
