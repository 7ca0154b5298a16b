"""
Tests for the Result[P] envelope and Timer.
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from pyregdiag.core.result import Result
from pyregdiag.core.compute import Timer, timed


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


class TestResult:

    def test_basic_creation(self):
        result = Result(
            params=FakeParams(value=42.0),
            info={"method": "test"},
            timing={"total_seconds": 0.01},
            backend_name="cpu",
        )
        assert result.params.value == 42.0
        assert result.info["method"] == "test"
        assert result.backend_name == "cpu"
        assert result.warnings == ()

    def test_frozen(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="cpu")
        with pytest.raises(FrozenInstanceError):
            result.backend_name = "gpu"

    def test_has_warning(self):
        result = Result(
            params=FakeParams(1.0),
            info={},
            timing=None,
            backend_name="cpu",
            warnings=("IRLS failed to converge in 20 steps",),
        )
        assert result.has_warning("converge")
        assert not result.has_warning("singular")


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section("a"):
            pass
        with timer.section("a"):
            pass
        with timer.section("b"):
            pass
        timer.stop()
        out = timer.result()
        assert set(out) == {"total_seconds", "a", "b"}
        assert out["total_seconds"] >= 0.0

    def test_result_before_stop_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()

    def test_stop_before_start_raises(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_timed_context(self):
        with timed() as timer:
            pass
        assert "total_seconds" in timer.result()
