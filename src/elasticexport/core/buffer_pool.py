"""响应缓冲池模块.

在一次导出会话的成千上万次顺序请求之间复用响应体缓冲区。
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class BufferPool:
    """同构 bytearray 缓冲池.

    取出的缓冲区总是逻辑上为空；归还时截断内容后放回池中。
    超出 max_buffers 的缓冲区直接丢弃，交给 GC 回收。

    Args:
        max_buffers: 池中最多保留的空闲缓冲区数量，默认 4

    示例:
        >>> pool = BufferPool()
        >>> with pool.borrow() as buf:
        ...     buf += b'{"hits": {}}'
    """

    def __init__(self, max_buffers: int = 4) -> None:
        if max_buffers < 1:
            raise ValueError(f"max_buffers 必须 >= 1，当前值: {max_buffers}")
        self.max_buffers = max_buffers
        self._free: list[bytearray] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._free)

    def acquire(self) -> bytearray:
        """取出一个空缓冲区，池为空时新建."""
        with self._lock:
            if self._free:
                return self._free.pop()
        return bytearray()

    def release(self, buffer: bytearray) -> None:
        """截断缓冲区并归还到池中."""
        del buffer[:]
        with self._lock:
            if len(self._free) < self.max_buffers:
                self._free.append(buffer)
                return
        logger.debug("缓冲池已满，丢弃缓冲区")

    @contextmanager
    def borrow(self) -> Iterator[bytearray]:
        """在 with 块内借用一个缓冲区，退出时自动归还."""
        buffer = self.acquire()
        try:
            yield buffer
        finally:
            self.release(buffer)
