"""字段提取异常定义模块."""

from ..core.exceptions import (
    FieldTypeError,
    MalformedJsonError,
    MissingFieldError,
    StructuralError,
)
from ..exceptions import EsExportError


class ShardFailureError(EsExportError):
    """分片失败异常.

    当页面报告 _shards.failed > 0 时抛出。部分分片的结果不可信，整页丢弃。

    Attributes:
        failed: 失败分片数
        failures: 原始的 _shards.failures 字节（用于诊断，可能为 None）
    """

    def __init__(self, failed: int, failures: bytes | None = None) -> None:
        message = f"_shards.failed = {failed}，拒绝部分分片结果"
        if failures:
            message = f"{message}: {failures[:1000].decode('utf-8', 'replace')}"
        super().__init__(message)
        self.failed = failed
        self.failures = failures


__all__ = [
    "FieldTypeError",
    "MalformedJsonError",
    "MissingFieldError",
    "ShardFailureError",
    "StructuralError",
]
