from fastapi.testclient import TestClient

from stepclock.adapters.synthetic import ManualTicker, SyntheticMotionSource, SyntheticStepSource
from stepclock.config import AppConfig
from stepclock.notifiers import RecordingNotifier
from stepclock.service import ActivityService
from stepclock.ui import create_app


def _client(tmp_path):
    steps = SyntheticStepSource()
    service = ActivityService(
        config=AppConfig(sensor_backend="none"),
        motion_source=SyntheticMotionSource(),
        step_source=steps,
        clock=ManualTicker(),
        notifier=RecordingNotifier(),
        settings_path=tmp_path / "settings.json",
    )
    return TestClient(create_app(service)), service, steps


def test_health(tmp_path) -> None:
    client, _, _ = _client(tmp_path)

    assert client.get("/health").json() == {"status": "ok"}


def test_snapshot_defaults(tmp_path) -> None:
    client, _, _ = _client(tmp_path)

    payload = client.get("/snapshot").json()

    assert payload["snapshot"]["tracking"] is False
    assert payload["snapshot"]["feedback_message"] == "Ready"
    assert payload["snapshot"]["acceleration"] == {"x": 0.0, "y": 0.0, "z": 0.0}
    assert payload["distance_display"] == "~0 m"
    assert payload["step_progress"] == 0.0
    assert payload["updated_at"] is None


def test_start_stop_and_toggle(tmp_path) -> None:
    client, service, steps = _client(tmp_path)

    started = client.post("/tracking/start").json()
    assert started["snapshot"]["tracking"] is True
    assert started["updated_at"] is not None

    steps.push_steps(4000, 3210.0)
    payload = client.get("/snapshot").json()
    assert payload["distance_display"] == "3.21 km"
    assert payload["step_progress"] == 0.5

    stopped = client.post("/tracking/stop").json()
    assert stopped["snapshot"]["tracking"] is False
    assert stopped["snapshot"]["steps"] == 4000

    toggled = client.post("/tracking/toggle").json()
    assert toggled["snapshot"]["tracking"] is True
    service.shutdown()


def test_settings_update_applies_live_and_persists(tmp_path) -> None:
    client, service, steps = _client(tmp_path)

    response = client.put(
        "/settings",
        json={"milestone_size": 100, "inactivity_timeout_minutes": 10, "step_goal": 2000},
    )

    assert response.status_code == 200
    assert client.get("/settings").json()["milestone_size"] == 100
    assert service.aggregator.config.inactivity_timeout_seconds == 600.0
    assert (tmp_path / "settings.json").exists()

    client.post("/tracking/start")
    steps.push_steps(100)
    assert client.get("/snapshot").json()["snapshot"]["feedback_message"] == "Great job. 100 steps reached."
    service.shutdown()


def test_settings_rejects_non_positive_values(tmp_path) -> None:
    client, _, _ = _client(tmp_path)

    response = client.put(
        "/settings",
        json={"milestone_size": 0, "inactivity_timeout_minutes": 10, "step_goal": 2000},
    )

    assert response.status_code == 422


def test_saved_settings_are_loaded_on_startup(tmp_path) -> None:
    client, _, _ = _client(tmp_path)
    client.put("/settings", json={"milestone_size": 250, "inactivity_timeout_minutes": 5, "step_goal": 3000})

    _, service, _ = _client(tmp_path)

    assert service.config.milestone_size == 250
    assert service.config.inactivity_timeout_seconds == 300.0
    assert service.config.step_goal == 3000


def test_build_notifier_backends() -> None:
    from stepclock.notifiers import LoggingNotifier, NullNotifier
    from stepclock.service import build_notifier, build_sources

    assert isinstance(build_notifier(AppConfig(notifier_backend="log")), LoggingNotifier)
    assert isinstance(build_notifier(AppConfig(notifier_backend="none")), NullNotifier)
    assert build_sources(AppConfig(sensor_backend="none")) == (None, None)
