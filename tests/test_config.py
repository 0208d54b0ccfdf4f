"""
单元测试：配置加载
"""

import pytest
from pydantic import ValidationError

from cpu_usage_agent import config as config_module
from cpu_usage_agent.config import AgentConfig, load_config


@pytest.fixture(autouse=True)
def _reset_global_config():
    config_module.reset_config()
    yield
    config_module.reset_config()


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:

    def test_full_config(self, tmp_path):
        """测试：完整配置文件"""
        path = _write(tmp_path, """
node_id: srv-01
listen: "127.0.0.1:9200"
token: secret
interval: 10
logging:
  level: DEBUG
inputs:
  cpu:
    collect_per_cpu: true
    common:
      interval: 30
      labels:
        region: bj
""")
        config = load_config(str(path))

        assert config.host == "127.0.0.1"
        assert config.port == 9200
        assert config.interval == 10
        assert config.logging.level == "DEBUG"
        assert config.inputs.cpu.collect_per_cpu is True
        assert config.inputs.cpu.common.interval == 30
        assert config.inputs.cpu.common.labels == {"region": "bj"}
        assert config.inputs.cpu.common.enabled is True

    def test_defaults(self, tmp_path):
        """测试：只填必填项时使用默认值"""
        config = load_config(str(_write(tmp_path, "node_id: n1\ntoken: t\n")))

        assert config.listen == "0.0.0.0:9110"
        assert config.interval == 15
        assert config.inputs.cpu.collect_per_cpu is False
        assert config.inputs.cpu.common.interval == 0
        assert config.logging.file is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_missing_required_field(self, tmp_path):
        with pytest.raises(ValidationError):
            load_config(str(_write(tmp_path, "node_id: n1\n")))

    def test_negative_interval_rejected(self, tmp_path):
        path = _write(tmp_path, """
node_id: n1
token: t
inputs:
  cpu:
    common:
      interval: -1
""")
        with pytest.raises(ValidationError):
            load_config(str(path))

    def test_env_path(self, tmp_path, monkeypatch):
        """测试：环境变量指定配置文件路径"""
        path = _write(tmp_path, "node_id: from-env\ntoken: t\n")
        monkeypatch.setenv("CPU_USAGE_AGENT_CONFIG", str(path))

        config = config_module.get_config()

        assert isinstance(config, AgentConfig)
        assert config.node_id == "from-env"
        assert config_module.get_config() is config
