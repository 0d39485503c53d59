"""导出会话异常定义模块."""

from ..exceptions import EsExportError


class ExportConfigError(EsExportError):
    """导出配置校验异常.

    当导出参数不合法时抛出，例如 index 为空、max_batch_size 小于 min_batch_size 等。
    """

    pass


class ExportTimeoutError(EsExportError):
    """导出超时异常.

    整个会话的截止时间已到，尚未完成的导出被中止。
    """

    pass


class HandlerError(EsExportError):
    """文档处理函数返回了无法识别的值."""

    pass
