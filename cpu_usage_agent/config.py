"""
配置管理模块

从 YAML 文件加载配置，支持环境变量指定配置文件路径
"""

import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field


class CommonSettings(BaseModel):
    """采集器通用配置（各采集器组合使用，不做继承）"""

    enabled: bool = Field(default=True, description="是否启用")
    interval: int = Field(default=0, ge=0, description="采集间隔（秒），0 表示使用全局 interval")
    labels: Dict[str, str] = Field(default_factory=dict, description="附加到每个指标上的标签")


class CpuInputConfig(BaseModel):
    """CPU 采集器配置"""

    collect_per_cpu: bool = Field(default=False, description="是否按每个 CPU 核心分别采集")
    common: CommonSettings = Field(default_factory=CommonSettings, description="通用配置")


class InputsConfig(BaseModel):
    """采集器配置集合"""

    cpu: CpuInputConfig = Field(default_factory=CpuInputConfig)


class LoggingConfig(BaseModel):
    """日志配置"""

    level: str = "INFO"
    file: Optional[str] = None


class AgentConfig(BaseModel):
    """Agent 配置模型"""

    node_id: str = Field(..., description="节点唯一标识")
    listen: str = Field(default="0.0.0.0:9110", description="监听地址")
    token: str = Field(..., description="认证 Token")
    interval: int = Field(default=15, gt=0, description="全局采集间隔（秒）")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    inputs: InputsConfig = Field(default_factory=InputsConfig)

    @property
    def host(self) -> str:
        """获取监听主机"""
        return self.listen.split(":")[0]

    @property
    def port(self) -> int:
        """获取监听端口"""
        return int(self.listen.split(":")[1])


def load_config(config_path: str = None) -> AgentConfig:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径，默认读取环境变量 CPU_USAGE_AGENT_CONFIG，
            未设置时为 /etc/cpu-usage-agent/config.yaml

    Returns:
        AgentConfig 实例

    Raises:
        FileNotFoundError: 配置文件不存在
    """
    if config_path is None:
        config_path = os.getenv(
            "CPU_USAGE_AGENT_CONFIG",
            "/etc/cpu-usage-agent/config.yaml"
        )

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"配置文件不存在: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    return AgentConfig(**config_data)


# 全局配置实例（延迟加载）
_config: Optional[AgentConfig] = None


def get_config() -> AgentConfig:
    """获取全局配置实例"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """重置配置（主要用于测试）"""
    global _config
    _config = None
