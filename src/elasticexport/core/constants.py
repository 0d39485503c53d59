"""ES Export 常量定义模块."""


class ExportDefaults:
    """导出会话默认配置."""

    # 滚动上下文保活时长
    SCROLL = "1m"

    # 每页目标字节数（字节预算模式）
    TARGET_PAGE_BYTES = 10 * 1024 * 1024

    # 每页文档数上下限
    MIN_BATCH_SIZE = 10
    MAX_BATCH_SIZE = 10000

    # 释放滚动上下文的请求超时（秒）
    RELEASE_TIMEOUT = 10.0

    # 需要类型段的旧版后端（ES 6.x）使用的通用类型
    DOC_TYPE = "_doc"


class ProbeDefaults:
    """批大小估算探测请求常量."""

    # 探测请求的固定样本数
    SAMPLE_SIZE = 100

    # 测得平均值不足 1 字节时使用的替代值
    FALLBACK_AVERAGE_DOC_BYTES = 1024


class ScrollEndpoints:
    """滚动 API 相关端点与参数."""

    # 续页与释放共用的端点
    SCROLL_PATH = "/_search/scroll"

    # 扫描效率最高的排序方式
    SCAN_SORT = ["_doc"]
