"""服务启动入口。"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# 确保 src 加入路径
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from scripts.dev_server import main as run_dev_server
from stepclock.config import AppConfig
from stepclock.core.snapshot import ActivitySnapshot
from stepclock.service import ActivityService


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="stepclock 活动聚合服务")
    parser.add_argument("--start", action="store_true", help="启动后立即开始追踪")
    parser.add_argument("--sensors", choices=["simulated", "none"], help="覆盖传感器后端")
    args = parser.parse_args()

    config = AppConfig.load()
    if args.sensors:
        config = config.model_copy(update={"sensor_backend": args.sensors})

    service = ActivityService(config=config)

    def log_feedback(snapshot: ActivitySnapshot) -> None:
        logging.getLogger(__name__).debug(
            "steps=%s inactive=%s feedback=%s", snapshot.steps, snapshot.inactive, snapshot.feedback_message
        )

    service.aggregator.subscribe(log_feedback)
    asyncio.run(run_dev_server(service=service, autostart=args.start))


if __name__ == "__main__":
    main()
