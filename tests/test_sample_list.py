"""
单元测试：SampleList
"""

from datetime import datetime, timezone

from cpu_usage_agent.sample_list import SampleList


class TestSampleList:

    def test_push_samples_names_and_labels(self):
        """测试：指标名为 prefix_key，标签复制到每个样本"""
        slist = SampleList()
        tags = {"unit": "cpu0"}

        slist.push_samples("cpu_usage", {"user": 12.5, "idle": 80}, tags)
        tags["unit"] = "changed"

        samples = slist.samples()
        assert [s.metric for s in samples] == ["cpu_usage_user", "cpu_usage_idle"]
        assert all(s.labels == {"unit": "cpu0"} for s in samples)
        assert samples[1].value == 80.0

    def test_shared_timestamp(self):
        ts = datetime(2026, 1, 20, 10, 0, 0, tzinfo=timezone.utc)
        slist = SampleList()

        slist.emit("cpu_usage", {"user": 1.0, "system": 2.0}, {"unit": "cpu-total"}, ts=ts)

        assert {s.timestamp for s in slist.samples()} == {ts}

    def test_add_labels_does_not_override(self):
        """测试：补充标签不覆盖已有标签"""
        slist = SampleList()
        slist.push_samples("cpu_usage", {"user": 1.0}, {"unit": "cpu0"})

        slist.add_labels({"unit": "other", "region": "bj"})

        assert slist.samples()[0].labels == {"unit": "cpu0", "region": "bj"}

    def test_samples_returns_copy(self):
        slist = SampleList()
        slist.push_samples("cpu_usage", {"user": 1.0})

        slist.samples().clear()

        assert len(slist) == 1
