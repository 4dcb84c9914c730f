# Shared fixtures for NeckCoach tests

import pytest

from neckcoach import (
    PostureEstimator,
    PostureSession,
    ManualClock,
    ManualTicker,
    EstimatorConfig,
    AccountingConfig
)


@pytest.fixture
def estimator():
    """Estimator calibrated to a zero baseline."""
    est = PostureEstimator()
    est.start_tracking()
    for _ in range(30):
        est.submit_sample(0.0, 0.0)
    return est


@pytest.fixture
def clock():
    return ManualClock(1000.0)


@pytest.fixture
def ticker(clock):
    return ManualTicker(clock, interval_sec=0.1)


@pytest.fixture
def session(clock, ticker):
    """Connected, untracked session running on virtual time."""
    s = PostureSession(EstimatorConfig(), AccountingConfig(), clock=clock, ticker=ticker)
    s.on_connect()
    return s
