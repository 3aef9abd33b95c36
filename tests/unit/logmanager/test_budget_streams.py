"""
批次预算与日志流命名单元测试
"""

from greengrass_logmanager.domain.enums import ComponentType
from greengrass_logmanager.logs.budget import (
    EVENT_STORAGE_OVERHEAD,
    MAX_BATCH_SIZE,
    TIMESTAMP_BYTES,
    BatchBudget,
    event_size,
)
from greengrass_logmanager.logs.streams import (
    StreamGrouper,
    build_log_group_name,
    build_log_stream_template,
)


class TestBatchBudget:
    """批次预算测试"""

    def test_wire_constants(self):
        """测试线上协议常量"""
        assert MAX_BATCH_SIZE == 1_048_576
        assert EVENT_STORAGE_OVERHEAD == 26
        assert TIMESTAMP_BYTES == 8

    def test_event_size_counts_utf8_bytes(self):
        """测试按 UTF-8 字节计算大小"""
        assert event_size("abc") == 3 + 34
        assert event_size("日志") == 6 + 34
        assert event_size("") == 34

    def test_admit_until_cap(self):
        """测试恰好达到上限时仍接受"""
        budget = BatchBudget(cap=event_size("a") * 2)

        assert budget.admit("a") is True
        assert budget.admit("b") is True
        assert budget.total_bytes == budget.cap
        assert budget.remaining == 0
        assert budget.exhausted is False

    def test_reject_does_not_mutate_total(self):
        """测试拒绝时不修改累计大小"""
        budget = BatchBudget(cap=100)
        assert budget.admit("x" * 50) is True

        assert budget.admit("y" * 50) is False
        assert budget.total_bytes == 84
        assert budget.exhausted is True

    def test_default_cap(self):
        budget = BatchBudget()
        assert budget.cap == MAX_BATCH_SIZE
        assert budget.admit("x" * (MAX_BATCH_SIZE - 34)) is True
        assert budget.admit("") is False


class TestStreamNaming:
    """日志组与日志流命名测试"""

    def test_log_group_name(self):
        """测试日志组名称"""
        name = build_log_group_name(ComponentType.USER_COMPONENT, "us-east-1", "com.example.Hello")
        assert name == "/aws/greengrass/UserComponent/us-east-1/com.example.Hello"

    def test_log_group_name_system_component(self):
        name = build_log_group_name("GreengrassSystemComponent", "eu-west-1", "System")
        assert name == "/aws/greengrass/GreengrassSystemComponent/eu-west-1/System"

    def test_thing_name_colon_replaced(self):
        """测试 Thing 名称中的 ':' 替换为 '+'"""
        assert build_log_stream_template("a:b:c") == "/{date}/thing/a+b+c"

    def test_stream_name_uses_record_date(self):
        """测试日志流日期取记录自身时间戳"""
        grouper = StreamGrouper("thing:1")

        # 2020-09-13T12:26:40Z
        assert grouper.stream_name(1_600_000_000_000) == "/2020/09/13/thing/thing+1"
        # 2021-03-04T05:06:07.890Z
        assert grouper.stream_name(1_614_834_367_890) == "/2021/03/04/thing/thing+1"

    def test_long_stream_name_warns(self, captured_logs):
        """测试日志流名称过长时记录警告"""
        grouper = StreamGrouper("t" * 600)

        name = grouper.stream_name(0)

        assert len(name) > 512
        assert any(m.startswith("WARNING") and "512" in m for m in captured_logs)
