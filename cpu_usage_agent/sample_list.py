"""
指标样本列表

采集器把计算结果写入 SampleList，由 Agent 缓存并通过 API 提供给中心节点拉取
"""

import threading
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from cpu_usage_agent.models import Sample


class SampleList:
    """线程安全的 Sample 列表"""

    def __init__(self):
        self._lock = threading.Lock()
        self._samples: List[Sample] = []

    def push_samples(
        self,
        prefix: str,
        fields: Mapping[str, float],
        tags: Optional[Mapping[str, str]] = None,
        ts: Optional[datetime] = None,
    ):
        """
        批量写入一组指标

        指标名为 "{prefix}_{key}"，同一组指标共用时间戳和标签。

        Args:
            prefix: 指标组名，如 "cpu_usage"
            fields: 指标名 -> 数值
            tags: 标签，如 {"unit": "cpu-total"}
            ts: 时间戳，默认当前 UTC 时间
        """
        if ts is None:
            ts = datetime.now(timezone.utc)
        labels = dict(tags or {})

        batch = [
            Sample(
                metric=f"{prefix}_{key}",
                value=float(value),
                labels=dict(labels),
                timestamp=ts,
            )
            for key, value in fields.items()
        ]
        with self._lock:
            self._samples.extend(batch)

    # 对外暴露的 sink 接口
    emit = push_samples

    def add_labels(self, labels: Dict[str, str]):
        """给已有样本补充标签（不覆盖已存在的同名标签）"""
        if not labels:
            return
        with self._lock:
            self._samples = [
                s.model_copy(update={"labels": {**labels, **s.labels}})
                for s in self._samples
            ]

    def samples(self) -> List[Sample]:
        with self._lock:
            return list(self._samples)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
