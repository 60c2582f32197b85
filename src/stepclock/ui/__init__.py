"""HTTP 接口层。"""

from .server import create_app

__all__ = ["create_app"]
