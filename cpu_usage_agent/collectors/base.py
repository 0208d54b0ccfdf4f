"""
采集器基类与注册表

Agent 启动时显式调用 register_builtin_collectors() 填充注册表，
再根据配置按名字创建采集器实例
"""

from typing import Callable, Dict, List, Optional

from cpu_usage_agent.config import CommonSettings
from cpu_usage_agent.sample_list import SampleList


class Collector:
    """采集器基类"""

    def __init__(self, settings: Optional[CommonSettings] = None):
        self.settings = settings or CommonSettings()
        # 最近一次采集的错误信息，None 表示成功
        self.last_error: Optional[str] = None

    @property
    def name(self) -> str:
        raise NotImplementedError

    def clone(self) -> "Collector":
        """返回一个新的、独立的采集器实例（不共享运行时状态）"""
        raise NotImplementedError

    def gather(self, slist: SampleList):
        """采集一轮数据并写入 slist"""
        raise NotImplementedError


CollectorFactory = Callable[..., Collector]


class CollectorRegistry:
    """采集器注册表：名字 -> 创建函数"""

    def __init__(self):
        self._factories: Dict[str, CollectorFactory] = {}

    def add(self, name: str, factory: CollectorFactory):
        if name in self._factories:
            raise ValueError(f"Collector already registered: {name}")
        self._factories[name] = factory

    def create(self, name: str, **kwargs) -> Collector:
        """
        按名字创建采集器

        Args:
            name: 采集器名字，如 "cpu"
            **kwargs: 透传给创建函数

        Raises:
            KeyError: 名字未注册
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise KeyError(f"Unknown collector: {name}") from None
        return factory(**kwargs)

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories
