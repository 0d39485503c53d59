"""后端传输异常定义模块."""

from ..exceptions import EsExportError


class TransportConfigError(EsExportError):
    """传输配置校验异常.

    当集群或连接配置参数不合法时抛出，例如 hosts 为空。
    """

    pass


class TransportFailureError(EsExportError):
    """传输失败异常.

    请求未能完成（网络错误、超时等）时抛出，不做自动重试。
    """

    pass


class ProtocolError(EsExportError):
    """协议异常.

    后端返回非成功状态码时抛出，错误信息中包含响应体以便诊断。

    Attributes:
        status: HTTP 状态码
        body: 原始响应体
    """

    def __init__(self, status: int, body: bytes = b"") -> None:
        text = body[:4096].decode("utf-8", "replace")
        super().__init__(f"请求失败: HTTP {status}: {text}")
        self.status = status
        self.body = body
