"""核心组件模块.

包含响应缓冲池、默认常量和响应结构异常。
"""

from .buffer_pool import BufferPool
from .constants import ExportDefaults, ProbeDefaults, ScrollEndpoints
from .exceptions import (
    FieldTypeError,
    MalformedJsonError,
    MissingFieldError,
    StructuralError,
)

__all__ = [
    "BufferPool",
    "ExportDefaults",
    "ProbeDefaults",
    "ScrollEndpoints",
    "StructuralError",
    "MissingFieldError",
    "FieldTypeError",
    "MalformedJsonError",
]
