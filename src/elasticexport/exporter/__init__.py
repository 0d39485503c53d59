"""滚动导出模块.

驱动 ES 滚动搜索 API 批量导出文档，每条文档以原始字节交给调用方的处理函数。

使用示例:
    from elasticexport.exporter import ExportOptions, HandlerAction, ScrollExporter

    def handler(payload, index, total):
        if index >= 1000:
            return HandlerAction.CANCEL
        out.write(payload + b"\\n")

    result = ScrollExporter(transport, ExportOptions(index="logs"), handler).run()
"""

from .exceptions import ExportConfigError, ExportTimeoutError, HandlerError
from .models import (
    ExportConfig,
    ExportOptions,
    ExportResult,
    ExportSession,
    HandlerAction,
    PageOutcome,
    resolve_options,
)
from .tool import ScrollExporter

__all__ = [
    # 导出器
    "ScrollExporter",
    # 模型
    "ExportOptions",
    "ExportConfig",
    "ExportSession",
    "ExportResult",
    "HandlerAction",
    "PageOutcome",
    "resolve_options",
    # 异常
    "ExportConfigError",
    "ExportTimeoutError",
    "HandlerError",
]
