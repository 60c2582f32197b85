"""开发环境启动 FastAPI 服务。"""

from __future__ import annotations

import asyncio
import logging
import signal
import threading
from contextlib import suppress
from typing import Optional

import uvicorn

from stepclock.service import ActivityService
from stepclock.ui import create_app

logger = logging.getLogger(__name__)


async def main(service: Optional[ActivityService] = None, autostart: bool = False) -> None:
    service = service or ActivityService()
    config = service.config
    app = create_app(service)

    if autostart:
        service.start()

    uvicorn_config = uvicorn.Config(app, host=config.server_host, port=config.server_port, reload=False)
    server = uvicorn.Server(uvicorn_config)

    try:
        if threading.current_thread() is threading.main_thread():
            stop_event = asyncio.Event()

            def _handle_stop(*_: object) -> None:
                logger.info("收到终止信号，准备关闭服务器…")
                stop_event.set()

            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, _handle_stop)

            async def _serve() -> None:
                await server.serve()
                stop_event.set()

            serve_task = asyncio.create_task(_serve())

            await stop_event.wait()
            serve_task.cancel()
            with suppress(asyncio.CancelledError):
                await serve_task
        else:
            await server.serve()
    finally:
        service.shutdown()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")
    asyncio.run(main())
