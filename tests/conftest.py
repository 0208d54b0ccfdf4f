"""
测试公共工具：假的平台接口与快照构造函数
"""

import sys
from pathlib import Path
from typing import List, Sequence, Union

# 添加项目路径到 sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cpu_usage_agent.models import CpuTimes
from cpu_usage_agent.system import PS


class FakePS(PS):
    """按顺序返回预设快照的平台接口；元素为异常时抛出"""

    def __init__(self, responses: Sequence[Union[List[CpuTimes], Exception]]):
        self.responses = list(responses)
        self.calls = []

    def fetch_cpu_times(self, per_cpu: bool, total_cpu: bool = True) -> List[CpuTimes]:
        self.calls.append((per_cpu, total_cpu))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_times(unit: str = "cpu-total", **fields) -> CpuTimes:
    return CpuTimes(unit=unit, **fields)


