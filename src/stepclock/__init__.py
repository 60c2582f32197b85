"""stepclock：运动传感器活动聚合服务。"""

__version__ = "0.1.0"
