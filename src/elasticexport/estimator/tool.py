"""批大小估算工具模块.

用一次小规模探测请求测量平均文档序列化大小，再据此计算每页文档数，
使后续每页响应接近目标字节预算。文档大小在不同索引间可能相差几个数量级，
按字节控制比固定文档数更能让每页的内存和延迟保持稳定。
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.buffer_pool import BufferPool
from ..core.constants import ExportDefaults, ProbeDefaults, ScrollEndpoints
from ..extractor import DEFAULT_PAYLOAD_FIELD, ShardFailureError, extract_page
from ..transport import ProtocolError, Transport
from .exceptions import EstimationError

logger = logging.getLogger(__name__)


def compute_batch_size(
    response_bytes: int,
    sample_count: int,
    target_bytes: int,
    min_size: int = ExportDefaults.MIN_BATCH_SIZE,
    max_size: int = ExportDefaults.MAX_BATCH_SIZE,
) -> int:
    """根据探测结果计算每页文档数.

    结果为 floor(target_bytes / (response_bytes / sample_count))，
    并限制在 [min_size, max_size] 区间内。全程使用整数运算避免浮点误差。

    Args:
        response_bytes: 探测响应的总字节数
        sample_count: 探测请求的固定样本数 N
        target_bytes: 每页目标字节数
        min_size: 每页文档数下限
        max_size: 每页文档数上限

    Returns:
        每页文档数

    示例:
        >>> compute_batch_size(100_000, 100, 10 * 1024 * 1024)
        10000
        >>> compute_batch_size(100_000, 100, 50_000)
        50
    """
    if sample_count <= 0:
        raise EstimationError("探测样本数必须 > 0")

    if response_bytes < sample_count:
        # 平均不足 1 字节，视为测量失真
        size = target_bytes // ProbeDefaults.FALLBACK_AVERAGE_DOC_BYTES
    else:
        size = target_bytes * sample_count // response_bytes

    return max(min_size, min(max_size, size))


class BatchSizeEstimator:
    """批大小估算器.

    Args:
        transport: 后端传输
        search_path: 搜索端点路径，如 "/logs/_search"
        query: 查询过滤条件（与正式导出相同）
        min_batch_size: 每页文档数下限
        max_batch_size: 每页文档数上限
        payload_field: 命中中的负载子字段
        buffer_pool: 响应缓冲池，默认新建
        sample_size: 探测请求的文档数 N，平均文档大小 = 响应字节数 / N

    示例:
        >>> estimator = BatchSizeEstimator(transport, "/logs/_search")
        >>> batch_size = estimator.estimate(10 * 1024 * 1024)
    """

    def __init__(
        self,
        transport: Transport,
        search_path: str,
        query: Any = None,
        min_batch_size: int = ExportDefaults.MIN_BATCH_SIZE,
        max_batch_size: int = ExportDefaults.MAX_BATCH_SIZE,
        payload_field: str = DEFAULT_PAYLOAD_FIELD,
        buffer_pool: BufferPool | None = None,
        sample_size: int = ProbeDefaults.SAMPLE_SIZE,
    ) -> None:
        self.transport = transport
        self.search_path = search_path
        self.query = query
        self.min_batch_size = min_batch_size
        self.max_batch_size = max_batch_size
        self.payload_field = payload_field
        self.buffer_pool = buffer_pool or BufferPool()
        self.sample_size = sample_size

    def _build_probe_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "size": self.sample_size,
            "sort": ScrollEndpoints.SCAN_SORT,
        }
        if self.query is not None:
            body["query"] = self.query
        return body

    def estimate(
        self,
        target_bytes: int = ExportDefaults.TARGET_PAGE_BYTES,
        timeout: float | None = None,
    ) -> int:
        """发送探测请求并估算每页文档数.

        Args:
            target_bytes: 每页目标字节数
            timeout: 探测请求超时（秒）

        Returns:
            每页文档数

        Raises:
            EstimationError: 探测结果为空
            ProtocolError: 非成功状态码
            ShardFailureError: 探测页存在失败分片
            StructuralError: 响应结构不符
        """
        with self.buffer_pool.borrow() as buffer:
            status = self.transport.perform_request(
                "POST",
                self.search_path,
                body=self._build_probe_body(),
                sink=buffer,
                timeout=timeout,
            )
            if not 200 <= status < 300:
                raise ProtocolError(status, bytes(buffer))

            page = extract_page(
                buffer, payload_field=self.payload_field, require_scroll_id=False
            )
            if page.shards_failed:
                raise ShardFailureError(page.shards_failed, page.shard_failures)
            if not len(page):
                raise EstimationError(
                    f"探测请求 {self.search_path} 未返回任何文档，无法估算批大小"
                )
            response_bytes = len(buffer)

        batch_size = compute_batch_size(
            response_bytes,
            self.sample_size,
            target_bytes,
            self.min_batch_size,
            self.max_batch_size,
        )
        logger.info(
            f"批大小估算: 样本 {self.sample_size} 条 / {response_bytes} 字节, "
            f"目标 {target_bytes} 字节/页 -> {batch_size} 条/页"
        )
        return batch_size
