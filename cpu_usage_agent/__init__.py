"""
CPU Usage Agent

定期采集 CPU 各状态使用率，供中心节点拉取
"""

__version__ = "1.0.0"
