"""流式字段提取模块.

用 msgspec 按声明的结构解码 ES 搜索/滚动响应，提取游标令牌、分片失败数、
命中总数，并逐条定位命中文档负载的原始字节区间。

使用示例:
    from elasticexport.extractor import extract_page

    page = extract_page(response_bytes)
    for doc in page.payloads():
        print(doc)
"""

from .exceptions import (
    FieldTypeError,
    MalformedJsonError,
    MissingFieldError,
    ShardFailureError,
    StructuralError,
)
from .models import DEFAULT_PAYLOAD_FIELD, Page
from .tool import extract_page

__all__ = [
    "extract_page",
    "Page",
    "DEFAULT_PAYLOAD_FIELD",
    "StructuralError",
    "MissingFieldError",
    "FieldTypeError",
    "MalformedJsonError",
    "ShardFailureError",
]
