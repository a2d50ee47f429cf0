# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# errors.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exceptions shared by the entities, the model and the config layer.
# -----------------------------------------------------------------------------

from __future__ import annotations

class InvalidStateError(RuntimeError):
    """A cashier transition was requested from a state that does not allow it."""
    def __init__(self, cashier_id: int, message: str):
        super().__init__(f"cashier {cashier_id}: {message}")
        self.cashier_id = cashier_id

class ConfigError(ValueError):
    """Configuration rejected before any run starts."""
