"""响应结构异常定义模块."""

from ..exceptions import EsExportError


class StructuralError(EsExportError):
    """响应结构异常基础类.

    响应中必需字段缺失、类型不符或 JSON 本身不合法时抛出。

    Attributes:
        path: 出错字段的路径（如 "hits.hits"），无法定位时为空字符串
    """

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class MissingFieldError(StructuralError):
    """必需字段缺失异常."""

    def __init__(self, path: str, detail: str = "") -> None:
        message = f"响应缺少必需字段: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, path)


class FieldTypeError(StructuralError):
    """字段类型不符异常.

    例如 hits.hits 期望为数组，实际为对象。
    """

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"字段 {path} 类型错误: 期望 {expected}，实际 {actual}", path
        )
        self.expected = expected
        self.actual = actual


class MalformedJsonError(StructuralError):
    """JSON 语法错误异常.

    Attributes:
        offset: 出错位置在缓冲区中的字节偏移，无法定位时为 -1
    """

    def __init__(self, reason: str, offset: int, path: str = "") -> None:
        super().__init__(f"JSON 格式错误 (偏移 {offset}): {reason}", path)
        self.offset = offset
