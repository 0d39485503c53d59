"""Elasticsearch 传输适配模块.

通过 elastic_transport 节点直接发送请求，响应体以原始字节返回，
绕过客户端的 JSON 反序列化。

使用示例:
    from elasticexport.transport import ClusterConfig, ElasticsearchTransport

    transport = ElasticsearchTransport.from_cluster(
        ClusterConfig(hosts=["http://localhost:9200"])
    )
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from elastic_transport import HttpHeaders, SerializationError, TransportError
from elasticsearch import Elasticsearch
from elasticsearch.dsl.serializer import serializer

from .exceptions import TransportFailureError
from .models import ClusterConfig, ConnectionConfig

logger = logging.getLogger(__name__)


def encode_body(body: Any) -> bytes:
    """把请求体编码为紧凑 JSON 字节.

    支持 elasticsearch.dsl 查询对象以及日期、Decimal、UUID 等值。

    Raises:
        SerializationError: 请求体中包含无法序列化的对象
    """
    return serializer.dumps(body)


def _describe(e: TransportError) -> str:
    """拼接异常消息和底层原因."""
    parts = [str(e.message)]
    parts.extend(f"{type(error).__name__}: {error}" for error in e.errors)
    return "; ".join(parts)


class ElasticsearchTransport:
    """基于 Elasticsearch 客户端节点池的原始字节传输.

    Args:
        client: Elasticsearch 客户端实例
        headers: 附加请求头，默认取客户端自身的请求头（含客户端生成的认证头）
    """

    def __init__(
        self,
        client: Elasticsearch,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.client = client
        if headers is None:
            headers = client._headers
        self._headers = HttpHeaders(headers)
        self._headers["accept"] = "application/json"

    @classmethod
    def from_cluster(
        cls,
        cluster_config: ClusterConfig,
        connection_config: ConnectionConfig | None = None,
    ) -> ElasticsearchTransport:
        """根据集群配置创建客户端和传输.

        Args:
            cluster_config: 集群连接与认证配置
            connection_config: 连接参数，默认使用 ConnectionConfig 的默认值

        Returns:
            ElasticsearchTransport 实例
        """
        connection_config = connection_config or ConnectionConfig()
        kwargs: dict = {
            "hosts": cluster_config.hosts,
            "request_timeout": connection_config.request_timeout,
            "http_compress": connection_config.http_compress,
            "verify_certs": cluster_config.verify_certs,
            # 导出流程不做任何自动重试
            "max_retries": 0,
            "retry_on_timeout": False,
        }
        # 认证方式按 Basic Auth / API Key / Bearer Token 的顺序取第一个
        if cluster_config.username and cluster_config.password:
            kwargs["basic_auth"] = (
                cluster_config.username,
                cluster_config.password,
            )
        elif cluster_config.api_key:
            kwargs["api_key"] = cluster_config.api_key
        elif cluster_config.bearer_token:
            kwargs["bearer_auth"] = cluster_config.bearer_token

        # SSL/TLS 配置
        if cluster_config.ca_certs:
            kwargs["ca_certs"] = cluster_config.ca_certs

        logger.info(f"创建 Elasticsearch 客户端: hosts={cluster_config.hosts}")
        return cls(Elasticsearch(**kwargs))

    def perform_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: Any = None,
        sink: bytearray,
        timeout: float | None = None,
    ) -> int:
        """发送请求，把原始响应体追加到 sink，返回状态码.

        Raises:
            TransportFailureError: 连接失败或超时
        """
        target = f"{path}?{urlencode(params)}" if params else path
        headers = HttpHeaders(self._headers)
        data = None
        if body is not None:
            try:
                data = encode_body(body)
            except SerializationError as e:
                raise TransportFailureError(
                    f"{method} {target} 请求体序列化失败: {_describe(e)}"
                ) from e
            headers["content-type"] = "application/json"

        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["request_timeout"] = timeout

        logger.debug(f"{method} {target}")
        node = self.client.transport.node_pool.get()
        try:
            response = node.perform_request(
                method, target, body=data, headers=headers, **kwargs
            )
        except TransportError as e:
            raise TransportFailureError(
                f"{method} {target} 失败: {_describe(e)}"
            ) from e

        sink += response.body
        return response.meta.status
