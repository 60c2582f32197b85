import json

import pytest
from pydantic import ValidationError

from stepclock.config import AppConfig
from stepclock.config_store import UserSettings, load_user_settings, resolve_config, save_user_settings


def test_defaults_match_documented_options() -> None:
    config = AppConfig()

    assert config.milestone_size == 500
    assert config.inactivity_timeout_seconds == 1800.0
    assert config.movement_accel_threshold == 0.03
    assert config.inactivity_tick_interval_seconds == 10.0
    assert config.accel_sample_rate_hz == 50.0
    assert config.gyro_sample_rate_hz == 50.0


@pytest.mark.parametrize(
    "field",
    ["inactivity_tick_interval_seconds", "accel_sample_rate_hz", "gyro_sample_rate_hz", "step_goal"],
)
def test_non_positive_values_rejected(field: str) -> None:
    with pytest.raises(ValidationError):
        AppConfig(**{field: 0})


def test_user_settings_round_trip(tmp_path) -> None:
    path = tmp_path / "config.json"
    settings = UserSettings(milestone_size=250, inactivity_timeout_minutes=20.0, step_goal=6000)

    save_user_settings(settings, path)

    assert json.loads(path.read_text(encoding="utf-8"))["milestone_size"] == 250
    assert load_user_settings(path) == settings


def test_missing_or_corrupt_settings_return_none(tmp_path) -> None:
    assert load_user_settings(tmp_path / "missing.json") is None

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert load_user_settings(corrupt) is None


def test_apply_to_overrides_rule_parameters() -> None:
    settings = UserSettings(milestone_size=1000, inactivity_timeout_minutes=45.0, step_goal=10000)

    config = settings.apply_to(AppConfig(sensor_backend="none"))

    assert config.milestone_size == 1000
    assert config.inactivity_timeout_seconds == 2700.0
    assert config.step_goal == 10000
    assert config.sensor_backend == "none"


def test_apply_to_validates() -> None:
    settings = UserSettings(milestone_size=0, inactivity_timeout_minutes=30.0, step_goal=8000)

    with pytest.raises(ValidationError):
        settings.apply_to(AppConfig())


def test_from_config_uses_minutes() -> None:
    settings = UserSettings.from_config(AppConfig(inactivity_timeout_seconds=900))

    assert settings.inactivity_timeout_minutes == 15.0
    assert settings.milestone_size == 500


def test_partial_settings_file_falls_back_to_base_config(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"milestone_size": 250}), encoding="utf-8")

    settings = load_user_settings(path, AppConfig(step_goal=12000, inactivity_timeout_seconds=600))

    assert settings == UserSettings(milestone_size=250, inactivity_timeout_minutes=10.0, step_goal=12000)


def test_non_object_settings_file_is_ignored(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert load_user_settings(path) is None


def test_resolve_config_applies_saved_settings(tmp_path) -> None:
    path = tmp_path / "config.json"
    save_user_settings(UserSettings(milestone_size=100, inactivity_timeout_minutes=5.0, step_goal=3000), path)

    config, settings = resolve_config(AppConfig(sensor_backend="none"), path)

    assert config.milestone_size == 100
    assert config.inactivity_timeout_seconds == 300.0
    assert config.sensor_backend == "none"
    assert settings.step_goal == 3000
    assert not (tmp_path / "config.json.tmp").exists()


def test_resolve_config_ignores_invalid_saved_settings(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"milestone_size": 0}), encoding="utf-8")
    base = AppConfig(milestone_size=750)

    config, settings = resolve_config(base, path)

    assert config == base
    assert settings == UserSettings.from_config(base)


def test_load_accepts_mapping_from_local_file(tmp_path) -> None:
    local = tmp_path / "config.local.py"
    local.write_text("CONFIG = {'milestone_size': 1000, 'notifier_backend': 'none'}\n", encoding="utf-8")

    config = AppConfig.load(local)

    assert config.milestone_size == 1000
    assert config.notifier_backend == "none"


def test_load_validates_local_overrides(tmp_path) -> None:
    local = tmp_path / "config.local.py"
    local.write_text("def load_config():\n    return {'milestone_size': -1}\n", encoding="utf-8")

    assert AppConfig.load(local) == AppConfig()


def test_load_falls_back_on_broken_or_missing_file(tmp_path) -> None:
    broken = tmp_path / "config.local.py"
    broken.write_text("raise RuntimeError('boom')\n", encoding="utf-8")

    assert AppConfig.load(broken) == AppConfig()
    assert AppConfig.load(tmp_path / "missing.py") == AppConfig()
