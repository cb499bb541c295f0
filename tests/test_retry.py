"""Tests for the retry decorator."""
import pytest

from fleetbox.core.retry import retry


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr("fleetbox.core.retry.time.sleep", recorded.append)
    return recorded


def test_returns_first_success(sleeps):
    @retry(max_attempts=3, delay=1.0)
    def ok():
        return 42

    assert ok() == 42
    assert sleeps == []


def test_exponential_backoff(sleeps):
    calls = []

    @retry(max_attempts=4, delay=1.0, backoff=2.0, exceptions=(ValueError,))
    def flaky():
        calls.append(1)
        raise ValueError("nope")

    with pytest.raises(ValueError, match="nope"):
        flaky()

    assert len(calls) == 4
    assert sleeps == [1.0, 2.0, 4.0]


def test_other_exceptions_propagate_immediately(sleeps):
    calls = []

    @retry(max_attempts=5, delay=1.0, exceptions=(ValueError,))
    def broken():
        calls.append(1)
        raise KeyError("x")

    with pytest.raises(KeyError):
        broken()

    assert len(calls) == 1
    assert sleeps == []
