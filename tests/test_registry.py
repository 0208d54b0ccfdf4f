"""
单元测试：采集器注册表
"""

import pytest

from cpu_usage_agent.collectors import (
    CollectorRegistry,
    CPUStats,
    register_builtin_collectors,
)

from tests.conftest import FakePS


class TestCollectorRegistry:

    def test_builtin_registration(self):
        registry = register_builtin_collectors(CollectorRegistry())

        assert "cpu" in registry
        assert registry.names() == ["cpu"]

    def test_create_passes_kwargs(self):
        """测试：create 参数透传给创建函数"""
        registry = register_builtin_collectors(CollectorRegistry())

        collector = registry.create("cpu", ps=FakePS([]), collect_per_cpu=True)

        assert isinstance(collector, CPUStats)
        assert collector.collect_per_cpu is True

    def test_create_returns_new_instance(self):
        registry = register_builtin_collectors(CollectorRegistry())
        ps = FakePS([])

        assert registry.create("cpu", ps=ps) is not registry.create("cpu", ps=ps)

    def test_duplicate_name_rejected(self):
        registry = register_builtin_collectors(CollectorRegistry())

        with pytest.raises(ValueError):
            registry.add("cpu", CPUStats)

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            CollectorRegistry().create("mem")

    def test_registries_are_independent(self):
        """测试：注册表之间不共享状态"""
        register_builtin_collectors(CollectorRegistry())

        assert "cpu" not in CollectorRegistry()
