"""后端传输模块 - 以原始字节形式与 Elasticsearch 交换请求和响应.

主要组件:
    - Transport: 传输协议接口（便于替换和测试）
    - ElasticsearchTransport: 基于 elasticsearch 客户端节点池的实现
    - ClusterConfig / ConnectionConfig: 连接配置模型

使用示例:
    from elasticexport.transport import ClusterConfig, ElasticsearchTransport

    transport = ElasticsearchTransport.from_cluster(
        ClusterConfig(hosts=["http://localhost:9200"])
    )
"""

from .exceptions import ProtocolError, TransportConfigError, TransportFailureError
from .models import ClusterConfig, ConnectionConfig, Transport
from .tool import ElasticsearchTransport, encode_body

__all__ = [
    # 传输
    "Transport",
    "ElasticsearchTransport",
    "encode_body",
    # 模型
    "ClusterConfig",
    "ConnectionConfig",
    # 异常
    "TransportConfigError",
    "TransportFailureError",
    "ProtocolError",
]
