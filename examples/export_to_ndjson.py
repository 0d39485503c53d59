"""滚动导出使用示例.

把索引中符合条件的文档逐行写入 NDJSON 文件，并定期打印进度。
"""

import logging
import sys
import threading

from elasticsearch.dsl import Q

from elasticexport import (
    ClusterConfig,
    ElasticsearchTransport,
    ExportOptions,
    HandlerAction,
    ScrollExporter,
)

logging.basicConfig(level=logging.INFO)

# 创建传输（认证信息同时用于客户端和原始请求）
transport = ElasticsearchTransport.from_cluster(
    ClusterConfig(
        hosts=["http://localhost:9200"],
        username="elastic",
        password="changeme",
    )
)


# ==================== 示例1：按字节预算导出整个查询结果 ====================
def example_export_all(path: str = "errors.ndjson"):
    """导出所有 error 级别日志."""
    options = ExportOptions(
        index="app-logs",
        query=Q("term", level="error"),
        scroll="2m",
        target_page_bytes=8 * 1024 * 1024,  # 每页约 8 MiB
    )

    with open(path, "wb") as out:

        def handler(payload: bytes, index: int, total: int):
            out.write(payload)
            out.write(b"\n")
            if index % 100_000 == 0:
                print(f"进度: {index}/{total}")

        result = ScrollExporter(transport, options, handler).run()

    print("导出结果:")
    print(f"  文档数: {result.dispatched}/{result.total}")
    print(f"  页数: {result.pages} (每页 {result.batch_size} 条)")
    print(f"  接收: {result.bytes_received / 1024 / 1024:.1f} MiB")
    print(f"  耗时: {result.took:.2f}秒")
    return result


# ==================== 示例2：只取前 N 条，并支持外部取消 ====================
def example_export_head(limit: int = 1000):
    """导出前 limit 条文档，5 分钟后无论进度如何都停止."""
    cancel_event = threading.Event()
    timer = threading.Timer(300, cancel_event.set)
    total_size = 0

    def handler(payload: bytes, index: int, total: int):
        nonlocal total_size
        if index >= limit:
            return HandlerAction.CANCEL
        total_size += len(payload)
        return HandlerAction.CONTINUE

    exporter = ScrollExporter(
        transport, ExportOptions(index="app-logs", batch_size=500), handler
    )
    timer.start()
    try:
        result = exporter.run(timeout=600, cancel_event=cancel_event)
    finally:
        timer.cancel()

    print(f"取消: {result.cancelled}, 文档数: {result.dispatched}, 大小: {total_size} 字节")
    return result


if __name__ == "__main__":
    example_export_all(sys.argv[1] if len(sys.argv) > 1 else "errors.ndjson")
    example_export_head()
