"""ES Export 类型定义模块."""

from collections.abc import Callable
from typing import Any

# 查询过滤条件类型（dict 或带 to_dict() 的 DSL 对象）
QueryType = Any

# 文档处理函数类型
# 参数: (文档原始字节, 全局序号, 后端报告的命中总数)
# 返回: HandlerAction 或 None
DocumentHandler = Callable[[bytes, int, int], Any]
