"""
批次大小预算

按 CloudWatch Logs PutLogEvents 的计费方式累计批次大小：
每条事件 = UTF-8 消息字节数 + 8 字节时间戳 + 26 字节事件开销，
整批不得超过 1,048,576 字节。
"""

from dataclasses import dataclass

# https://docs.aws.amazon.com/AmazonCloudWatchLogs/latest/APIReference/API_PutLogEvents.html
MAX_BATCH_SIZE = 1024 * 1024
EVENT_STORAGE_OVERHEAD = 26
TIMESTAMP_BYTES = 8


def event_size(message: str) -> int:
    """单条事件的线上大小"""
    return len(message.encode("utf-8")) + TIMESTAMP_BYTES + EVENT_STORAGE_OVERHEAD


@dataclass
class BatchBudget:
    """
    批次预算

    只属于一次处理过程，不跨线程共享。
    """

    cap: int = MAX_BATCH_SIZE
    total_bytes: int = 0
    exhausted: bool = False

    @property
    def remaining(self) -> int:
        return self.cap - self.total_bytes

    def admit(self, message: str) -> bool:
        """
        为一条事件申请预算

        超过上限时拒绝且不修改累计大小，并标记预算耗尽。

        Returns:
            是否接受
        """
        size = event_size(message)
        if self.total_bytes + size > self.cap:
            self.exhausted = True
            return False

        self.total_bytes += size
        return True
