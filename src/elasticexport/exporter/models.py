"""导出会话数据模型定义模块.

提供导出相关的数据模型，包括：
- ExportOptions / ExportConfig: 原始配置与生效配置
- ExportSession: 单次导出的可变状态
- HandlerAction / PageOutcome: 处理函数返回值与分页步骤结果
- ExportResult: 导出结果统计
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..core.constants import ExportDefaults
from ..extractor import DEFAULT_PAYLOAD_FIELD
from .exceptions import ExportConfigError


class HandlerAction(Enum):
    """文档处理函数的返回值.

    Attributes:
        CONTINUE: 继续导出（返回 None 等价于 CONTINUE）
        CANCEL: 立即停止，不视为错误
    """

    CONTINUE = "continue"
    CANCEL = "cancel"


class PageOutcome(Enum):
    """分页步骤的结果.

    失败通过异常传播，不在此枚举中。

    Attributes:
        CONTINUE: 本页已全部分发，继续请求下一页
        CANCELLED: 处理函数或取消事件要求停止
        EXHAUSTED: 本页没有文档，结果集已耗尽
    """

    CONTINUE = "continue"
    CANCELLED = "cancelled"
    EXHAUSTED = "exhausted"


@dataclass
class ExportOptions:
    """导出原始配置.

    除 index 外都可省略，由 resolve_options() 统一填充默认值。

    Attributes:
        index: 索引名称（必需）
        doc_type: 文档类型；None 表示不带类型段（ES 7+），
            旧版后端可使用 ExportDefaults.DOC_TYPE
        query: 查询过滤条件，dict 或带 to_dict() 的 DSL 对象，None 表示全部文档
        scroll: 滚动上下文保活时长，默认 "1m"
        batch_size: 固定每页文档数；设置后不再估算
        target_page_bytes: 每页目标字节数，默认 10 MiB
        min_batch_size: 估算结果下限，默认 10
        max_batch_size: 估算结果上限，默认 10000
        payload_field: 命中中要提取的子字段，默认 "_source"
        request_timeout: 单次请求超时（秒），None 表示使用传输默认值
        release_timeout: 释放滚动上下文的请求超时（秒），默认 10
    """

    index: str = ""
    doc_type: str | None = None
    query: Any = None
    scroll: str | None = None
    batch_size: int | None = None
    target_page_bytes: int | None = None
    min_batch_size: int | None = None
    max_batch_size: int | None = None
    payload_field: str | None = None
    request_timeout: float | None = None
    release_timeout: float | None = None


@dataclass(frozen=True)
class ExportConfig:
    """导出生效配置，构造后不可修改."""

    index: str
    doc_type: str | None
    query: Any
    scroll: str
    batch_size: int | None
    target_page_bytes: int
    min_batch_size: int
    max_batch_size: int
    payload_field: str
    request_timeout: float | None
    release_timeout: float

    @property
    def search_path(self) -> str:
        """首页与探测请求使用的搜索端点."""
        if self.doc_type:
            return f"/{self.index}/{self.doc_type}/_search"
        return f"/{self.index}/_search"


def resolve_options(options: ExportOptions) -> ExportConfig:
    """把原始配置转换为生效配置.

    Args:
        options: 原始配置

    Returns:
        填充默认值并校验后的配置

    Raises:
        ExportConfigError: 参数不合法
    """
    if not options.index:
        raise ExportConfigError("index 不能为空")

    def _pick(value, default):
        return default if value is None else value

    config = ExportConfig(
        index=options.index,
        doc_type=options.doc_type or None,
        query=options.query,
        scroll=_pick(options.scroll, ExportDefaults.SCROLL),
        batch_size=options.batch_size,
        target_page_bytes=_pick(
            options.target_page_bytes, ExportDefaults.TARGET_PAGE_BYTES
        ),
        min_batch_size=_pick(options.min_batch_size, ExportDefaults.MIN_BATCH_SIZE),
        max_batch_size=_pick(options.max_batch_size, ExportDefaults.MAX_BATCH_SIZE),
        payload_field=_pick(options.payload_field, DEFAULT_PAYLOAD_FIELD),
        request_timeout=options.request_timeout,
        release_timeout=_pick(options.release_timeout, ExportDefaults.RELEASE_TIMEOUT),
    )

    if not config.scroll:
        raise ExportConfigError("scroll 不能为空")
    if not config.payload_field:
        raise ExportConfigError("payload_field 不能为空")
    if config.batch_size is not None and config.batch_size < 1:
        raise ExportConfigError(f"batch_size 必须 >= 1，当前值: {config.batch_size}")
    if config.target_page_bytes < 1:
        raise ExportConfigError(
            f"target_page_bytes 必须 >= 1，当前值: {config.target_page_bytes}"
        )
    if config.min_batch_size < 1:
        raise ExportConfigError(
            f"min_batch_size 必须 >= 1，当前值: {config.min_batch_size}"
        )
    if config.max_batch_size < config.min_batch_size:
        raise ExportConfigError(
            f"max_batch_size ({config.max_batch_size}) 不能小于 "
            f"min_batch_size ({config.min_batch_size})"
        )
    if config.request_timeout is not None and config.request_timeout <= 0:
        raise ExportConfigError(
            f"request_timeout 必须 > 0，当前值: {config.request_timeout}"
        )
    return config


@dataclass
class ExportSession:
    """单次导出的可变状态，仅由分页引擎修改.

    Attributes:
        scroll_id: 最近一次返回的游标令牌，空字符串表示尚未发出首个请求
        emitted: 已成功分发的文档数，也是下一条文档的序号
        total: 最近一页报告的命中总数
        pages: 已请求的页数
        bytes_received: 已接收的响应字节数
    """

    scroll_id: str = ""
    emitted: int = 0
    total: int = 0
    pages: int = 0
    bytes_received: int = 0


@dataclass
class ExportResult:
    """导出结果.

    Attributes:
        outcome: 结束原因（EXHAUSTED 或 CANCELLED）
        dispatched: 分发给处理函数的文档数
        total: 后端最后报告的命中总数
        pages: 请求的页数
        bytes_received: 接收的响应字节数
        batch_size: 实际使用的每页文档数
        took: 总耗时（秒）
    """

    outcome: PageOutcome
    dispatched: int = 0
    total: int = 0
    pages: int = 0
    bytes_received: int = 0
    batch_size: int = 0
    took: float = 0.0

    @property
    def cancelled(self) -> bool:
        """是否因取消而提前结束."""
        return self.outcome is PageOutcome.CANCELLED
