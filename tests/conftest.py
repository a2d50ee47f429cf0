import pytest

from checkoutsim.config import DEFAULT_CFG, apply_overrides


class FixedSource:
    """Deterministic stand-in for ExponentialSource: always returns the same duration."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def sample(self):
        self.calls += 1
        return self.value


@pytest.fixture
def fixed_source():
    return FixedSource


@pytest.fixture
def make_cfg():
    def _make(**sections):
        return apply_overrides(DEFAULT_CFG, sections)
    return _make
