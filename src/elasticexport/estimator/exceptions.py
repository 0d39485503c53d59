"""批大小估算异常定义模块."""

from ..exceptions import EsExportError


class EstimationError(EsExportError):
    """批大小估算异常.

    探测请求没有返回任何文档（如索引为空）时抛出，此时尚未开始真正的分页。
    """

    pass
