"""后端传输数据模型定义模块.

提供传输相关的数据模型，包括：
- Transport: 传输协议接口
- ClusterConfig: 集群连接与认证配置
- ConnectionConfig: 连接参数配置
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from .exceptions import TransportConfigError


class Transport(Protocol):
    """后端传输接口.

    发送一次 HTTP 请求，把原始响应体追加写入 sink，返回状态码。
    网络层失败时抛出 TransportFailureError；非 2xx 状态码不抛异常。
    """

    def perform_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: Any = None,
        sink: bytearray,
        timeout: float | None = None,
    ) -> int: ...


@dataclass
class ClusterConfig:
    """集群配置模型.

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（编码后的字符串或 (id, key) 元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True

    Raises:
        TransportConfigError: 当 hosts 为空时抛出

    Examples:
        >>> config = ClusterConfig(
        ...     hosts=["http://localhost:9200"],
        ...     username="elastic",
        ...     password="changeme",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True

    def __post_init__(self) -> None:
        """校验集群配置参数合法性."""
        if not self.hosts:
            raise TransportConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")


@dataclass
class ConnectionConfig:
    """连接参数配置模型.

    导出请求严格串行，不做重试，因此只保留与单次请求相关的参数。

    Attributes:
        request_timeout: 默认请求超时时间（秒），默认 30，必须 >= 0
        http_compress: 是否启用 HTTP 压缩，默认 True

    Raises:
        TransportConfigError: 当参数不合法时抛出
    """

    request_timeout: float = 30
    http_compress: bool = True

    def __post_init__(self) -> None:
        """校验连接参数合法性."""
        if self.request_timeout < 0:
            raise TransportConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
