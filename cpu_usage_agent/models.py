"""
数据模型定义

使用 Pydantic 定义 CPU 时间快照、指标样本以及 API 响应数据结构
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CpuTimes(BaseModel):
    """
    某个 CPU 单元的累计时间快照（单位：秒，自开机起累计）

    unit 为 "cpu-total"（整体）或 "cpu0"、"cpu1" 等（单核）
    """
    unit: str = Field(..., description="CPU 单元标识")
    user: float = Field(default=0.0, description="用户态时间")
    system: float = Field(default=0.0, description="内核态时间")
    idle: float = Field(default=0.0, description="空闲时间")
    nice: float = Field(default=0.0, description="低优先级用户态时间")
    iowait: float = Field(default=0.0, description="等待 IO 时间")
    irq: float = Field(default=0.0, description="硬中断时间")
    softirq: float = Field(default=0.0, description="软中断时间")
    steal: float = Field(default=0.0, description="被虚拟化宿主占用的时间")
    guest: float = Field(default=0.0, description="运行虚拟机的时间（已计入 user）")
    guest_nice: float = Field(default=0.0, description="运行低优先级虚拟机的时间（已计入 nice）")

    class Config:
        frozen = True


def total_cpu_time(t: CpuTimes) -> float:
    """
    总时间

    guest/guest_nice 已分别计入 user/nice，不再重复累加
    """
    return t.user + t.system + t.nice + t.iowait + t.irq + t.softirq + t.steal + t.idle


def active_cpu_time(t: CpuTimes) -> float:
    """活跃时间 = 总时间 - 空闲时间"""
    return total_cpu_time(t) - t.idle


class Sample(BaseModel):
    """单个指标点"""
    metric: str = Field(..., description="指标名，如 cpu_usage_user")
    value: float = Field(..., description="指标值")
    labels: Dict[str, str] = Field(default_factory=dict, description="标签")
    timestamp: datetime = Field(..., description="采集时间 (UTC)")


class SamplesResponse(BaseModel):
    """最新指标响应"""
    node_id: str = Field(..., description="节点 ID")
    ts: datetime = Field(..., description="响应时间戳")
    samples: List[Sample] = Field(default_factory=list, description="最新一轮采集的指标")


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = Field(..., description="健康状态: ok|degraded")
    timestamp: datetime = Field(..., description="检查时间")
    checks: Dict[str, str] = Field(..., description="各采集器检查结果")
    details: Dict[str, Optional[str]] = Field(..., description="详细信息")
