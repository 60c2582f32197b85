import pytest

from stepclock.core.display import distance_display, distance_progress, estimate_distance, step_progress


def test_estimated_distance_below_one_kilometer_stays_in_meters() -> None:
    assert estimate_distance(1282) == pytest.approx(999.96)
    assert distance_display(None, 1282) == "~1000 m"


def test_native_distance_in_kilometers() -> None:
    assert distance_display(3210.0, 0) == "3.21 km"


def test_native_distance_in_meters() -> None:
    assert distance_display(742.4, 5000) == "742 m"


def test_estimated_distance_in_kilometers() -> None:
    assert distance_display(None, 2000) == "~1.56 km"


def test_zero_state() -> None:
    assert distance_display(None, 0) == "~0 m"
    assert distance_display(0.0, 0) == "0 m"


def test_custom_stride_length() -> None:
    assert distance_display(None, 100, stride_meters=1.0) == "~100 m"


def test_step_progress_is_clamped() -> None:
    assert step_progress(4000, 8000) == 0.5
    assert step_progress(12000, 8000) == 1.0
    assert step_progress(100, 0) == 0.0


def test_distance_progress_prefers_native_distance() -> None:
    assert distance_progress(2500.0, 0, 5000.0) == 0.5
    assert distance_progress(None, 1000, 5000.0) == pytest.approx(780 / 5000)
    assert distance_progress(9000.0, 0, 5000.0) == 1.0
