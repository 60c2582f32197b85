"""本地配置覆盖示例（AppConfig.load 会自动加载同名文件中的 load_config）。"""

from stepclock.config import AppConfig


def load_config() -> AppConfig:
    return AppConfig(
        milestone_size=500,
        inactivity_timeout_seconds=30 * 60,
        movement_accel_threshold=0.03,
        inactivity_tick_interval_seconds=10.0,
        accel_sample_rate_hz=50.0,
        gyro_sample_rate_hz=50.0,
        step_goal=8000,
        distance_goal_meters=5000.0,
        notifications_enabled=True,
        sensor_backend="simulated",
        notifier_backend="log",
        # notifier_backend="macos",
    )
