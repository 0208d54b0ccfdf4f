"""
采集调度

按各采集器的间隔周期性执行采集，缓存每个采集器最近一轮的结果
"""

import asyncio
import logging
import threading
from typing import Dict, List, Optional

from cpu_usage_agent.collectors import Collector, CollectorRegistry
from cpu_usage_agent.config import AgentConfig
from cpu_usage_agent.models import Sample
from cpu_usage_agent.sample_list import SampleList
from cpu_usage_agent.system import PS

logger = logging.getLogger(__name__)

# 采集器尚未完成过一次采集
PENDING = object()


def build_collectors(
    config: AgentConfig,
    registry: CollectorRegistry,
    ps: Optional[PS] = None,
) -> List[Collector]:
    """
    根据配置创建启用的采集器

    Args:
        config: Agent 配置
        registry: 已注册内置采集器的注册表
        ps: 平台统计接口，默认使用当前系统实现
    """
    collectors: List[Collector] = []

    cpu_config = config.inputs.cpu
    if cpu_config.common.enabled:
        kwargs = {
            "collect_per_cpu": cpu_config.collect_per_cpu,
            "settings": cpu_config.common,
        }
        if ps is not None:
            kwargs["ps"] = ps
        collectors.append(registry.create("cpu", **kwargs))
    else:
        logger.info("Collector cpu disabled in config")

    return collectors


class Agent:
    """采集器宿主：调度采集并缓存最新样本"""

    def __init__(
        self,
        config: AgentConfig,
        registry: CollectorRegistry,
        ps: Optional[PS] = None,
    ):
        self.config = config
        self.collectors = build_collectors(config, registry, ps)
        self._lock = threading.Lock()
        self._latest: Dict[str, SampleList] = {}
        self._errors: Dict[str, Optional[str]] = {}
        self._tasks: List[asyncio.Task] = []

    def interval_for(self, collector: Collector) -> int:
        """采集器自身 interval 为 0 时使用全局 interval"""
        return collector.settings.interval or self.config.interval

    def gather_collector(self, collector: Collector):
        """执行一次采集，异常只记录不抛出"""
        slist = SampleList()
        try:
            collector.gather(slist)
        except Exception as e:
            logger.error(f"Collector {collector.name} failed: {e}", exc_info=True)
            with self._lock:
                self._errors[collector.name] = str(e)
            return

        if collector.last_error is not None:
            # 读取失败时保留上一轮结果
            with self._lock:
                self._errors[collector.name] = collector.last_error
            return

        slist.add_labels(collector.settings.labels)
        with self._lock:
            self._latest[collector.name] = slist
            self._errors[collector.name] = None
        logger.debug(f"Collector {collector.name} produced {len(slist)} samples")

    def gather_once(self):
        """所有采集器各执行一次"""
        for collector in self.collectors:
            self.gather_collector(collector)

    def latest_samples(self) -> List[Sample]:
        with self._lock:
            latest = list(self._latest.values())
        samples: List[Sample] = []
        for slist in latest:
            samples.extend(slist.samples())
        return samples

    def status(self) -> Dict[str, object]:
        """
        各采集器状态

        Returns:
            采集器名 -> 最近一次错误信息；None 表示正常，PENDING 表示尚未运行
        """
        with self._lock:
            return {
                c.name: self._errors.get(c.name, PENDING)
                for c in self.collectors
            }

    async def _run_collector(self, collector: Collector):
        interval = self.interval_for(collector)
        logger.info(f"Starting collector {collector.name} (interval={interval}s)")

        while True:
            await asyncio.to_thread(self.gather_collector, collector)
            await asyncio.sleep(interval)

    def start(self):
        """在当前事件循环中启动所有采集任务"""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._run_collector(c), name=f"collector-{c.name}")
            for c in self.collectors
        ]

    async def stop(self):
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("All collectors stopped")
