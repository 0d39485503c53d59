"""字段提取数据模型定义模块.

响应结构用 msgspec.Struct 描述，只声明导出需要的字段，其余字段解码时直接跳过。
命中文档负载声明为 msgspec.Raw，保留原始字节区间而不解码。
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import msgspec

DEFAULT_PAYLOAD_FIELD = "_source"


class Total(msgspec.Struct):
    """ES 7.x+ 的 hits.total 对象格式."""

    value: int
    relation: str = "eq"


class Shards(msgspec.Struct):
    """响应中的 _shards 部分."""

    failed: int
    failures: msgspec.Raw = msgspec.field(default_factory=lambda: msgspec.Raw(b""))


@dataclass
class Page:
    """一次往返得到的页面视图.

    只保存响应头部字段和每条命中文档负载的原始字节引用，
    文档字节在 payloads() 迭代时逐条生成。

    Attributes:
        scroll_id: 游标令牌（探测请求没有游标时为 None）
        shards_failed: 失败分片数
        total: 后端报告的命中总数
        shard_failures: 原始的 _shards.failures 字节
        raws: 每条文档负载的原始字节引用
    """

    scroll_id: str | None
    shards_failed: int
    total: int
    shard_failures: bytes | None = None
    raws: list[msgspec.Raw] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.raws)

    def payloads(self) -> Iterator[bytes]:
        """按顺序产出每条文档负载的原始字节."""
        for raw in self.raws:
            yield bytes(raw)
