"""ES Export - Elasticsearch 高性能批量导出工具包.

通过滚动搜索 API 导出整个索引（或查询结果），不把文档反序列化为对象，
只在响应字节中定位每条文档的 _source 区间并原样交给调用方处理。

主要功能:
    - ScrollExporter: 分页引擎，管理游标生命周期与文档分发
    - BatchSizeEstimator: 按每页字节预算估算每页文档数
    - extract_page: 基于 msgspec 的响应字段提取，文档负载保持原始字节
    - ElasticsearchTransport: 返回原始字节的 ES 传输适配

使用示例:
    from elasticexport import (
        ClusterConfig,
        ElasticsearchTransport,
        ExportOptions,
        ScrollExporter,
    )

    transport = ElasticsearchTransport.from_cluster(
        ClusterConfig(hosts=["http://localhost:9200"])
    )
    with open("logs.ndjson", "wb") as out:

        def handler(payload, index, total):
            out.write(payload + b"\\n")

        result = ScrollExporter(transport, ExportOptions(index="logs"), handler).run()
"""

__version__ = "0.1.0"

# 导出核心组件
from elasticexport.core import BufferPool

# 导出估算器
from elasticexport.estimator import (
    BatchSizeEstimator,
    EstimationError,
    compute_batch_size,
)

# 导出异常
from elasticexport.exceptions import EsExportError

# 导出导出器
from elasticexport.exporter import (
    ExportConfig,
    ExportConfigError,
    ExportOptions,
    ExportResult,
    ExportTimeoutError,
    HandlerAction,
    HandlerError,
    PageOutcome,
    ScrollExporter,
    resolve_options,
)

# 导出提取器
from elasticexport.extractor import (
    FieldTypeError,
    MalformedJsonError,
    MissingFieldError,
    Page,
    ShardFailureError,
    StructuralError,
    extract_page,
)

# 导出传输
from elasticexport.transport import (
    ClusterConfig,
    ConnectionConfig,
    ElasticsearchTransport,
    ProtocolError,
    Transport,
    TransportConfigError,
    TransportFailureError,
)

__all__ = [
    # 版本
    "__version__",
    # 导出器
    "ScrollExporter",
    "ExportOptions",
    "ExportConfig",
    "ExportResult",
    "HandlerAction",
    "PageOutcome",
    "resolve_options",
    # 估算器
    "BatchSizeEstimator",
    "compute_batch_size",
    # 提取器
    "extract_page",
    "Page",
    # 核心组件
    "BufferPool",
    # 传输
    "Transport",
    "ElasticsearchTransport",
    "ClusterConfig",
    "ConnectionConfig",
    # 异常
    "EsExportError",
    "TransportConfigError",
    "TransportFailureError",
    "ProtocolError",
    "ShardFailureError",
    "StructuralError",
    "MissingFieldError",
    "FieldTypeError",
    "MalformedJsonError",
    "EstimationError",
    "ExportConfigError",
    "ExportTimeoutError",
    "HandlerError",
]
