"""ES Export 异常定义模块."""


class EsExportError(Exception):
    """ES Export 基础异常类."""

    pass
