"""滚动导出核心工具类.

驱动 ES 滚动搜索 API 完成整个导出：首页打开服务端扫描状态，续页携带最新的
游标令牌，每页响应经流式提取后逐条交给处理函数，遇到空页、取消或错误时结束，
并在退出时尽力释放服务端的滚动上下文。
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from ..core.buffer_pool import BufferPool
from ..core.constants import ScrollEndpoints
from ..estimator import BatchSizeEstimator
from ..extractor import ShardFailureError, extract_page
from ..transport import ProtocolError, Transport
from ..typing import DocumentHandler
from .exceptions import ExportTimeoutError, HandlerError
from .models import (
    ExportConfig,
    ExportOptions,
    ExportResult,
    ExportSession,
    HandlerAction,
    PageOutcome,
    resolve_options,
)

logger = logging.getLogger(__name__)


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _discard(payload: bytes, index: int, total: int) -> None:
    return None


class ScrollExporter:
    """滚动导出器.

    请求严格串行：上一页的文档全部分发完之前不会请求下一页，
    处理函数阻塞时整条流水线随之阻塞，内存中最多只有一页响应。

    Args:
        transport: 后端传输
        options: 导出配置（ExportOptions 会在构造时解析为 ExportConfig）
        handler: 文档处理函数 (payload, index, total) -> HandlerAction | None，
            默认丢弃所有文档
        buffer_pool: 响应缓冲池，默认新建

    示例:
        >>> def handler(payload, index, total):
        ...     out.write(payload + b"\\n")
        >>> exporter = ScrollExporter(
        ...     transport, ExportOptions(index="logs"), handler
        ... )
        >>> result = exporter.run()
        >>> print(f"导出 {result.dispatched}/{result.total}")
    """

    def __init__(
        self,
        transport: Transport,
        options: ExportOptions | ExportConfig,
        handler: DocumentHandler | None = None,
        buffer_pool: BufferPool | None = None,
    ) -> None:
        if isinstance(options, ExportOptions):
            options = resolve_options(options)
        self.config = options
        self.transport = transport
        self.handler = handler or _discard
        self.buffer_pool = buffer_pool or BufferPool()

    # ========== 请求构建 ==========

    def _build_first_body(self, batch_size: int) -> dict[str, Any]:
        body: dict[str, Any] = {
            "size": batch_size,
            "sort": ScrollEndpoints.SCAN_SORT,
        }
        if self.config.query is not None:
            body["query"] = self.config.query
        return body

    def _build_request(
        self, session: ExportSession, batch_size: int
    ) -> tuple[str, dict[str, Any] | None, dict[str, Any]]:
        """构建本页请求，返回 (路径, 查询参数, 请求体)."""
        if not session.scroll_id:
            return (
                self.config.search_path,
                {"scroll": self.config.scroll},
                self._build_first_body(batch_size),
            )
        return (
            ScrollEndpoints.SCROLL_PATH,
            None,
            {"scroll": self.config.scroll, "scroll_id": session.scroll_id},
        )

    def _request_timeout(self, deadline: float | None) -> float | None:
        """计算本次请求的超时：单请求超时与会话剩余时间取较小者."""
        timeout = self.config.request_timeout
        if deadline is None:
            return timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ExportTimeoutError("导出已超过截止时间")
        return remaining if timeout is None else min(timeout, remaining)

    # ========== 分页 ==========

    def _resolve_batch_size(self, deadline: float | None) -> int:
        if self.config.batch_size is not None:
            return self.config.batch_size
        estimator = BatchSizeEstimator(
            self.transport,
            self.config.search_path,
            query=self.config.query,
            min_batch_size=self.config.min_batch_size,
            max_batch_size=self.config.max_batch_size,
            payload_field=self.config.payload_field,
            buffer_pool=self.buffer_pool,
        )
        return estimator.estimate(
            self.config.target_page_bytes, timeout=self._request_timeout(deadline)
        )

    def _fetch_page(
        self,
        session: ExportSession,
        batch_size: int,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> PageOutcome:
        """请求一页并分发其中的全部文档."""
        path, params, body = self._build_request(session, batch_size)
        timeout = self._request_timeout(deadline)

        with self.buffer_pool.borrow() as buffer:
            status = self.transport.perform_request(
                "POST", path, params=params, body=body, sink=buffer, timeout=timeout
            )
            session.pages += 1
            session.bytes_received += len(buffer)
            if not _is_success(status):
                raise ProtocolError(status, bytes(buffer))

            page = extract_page(buffer, payload_field=self.config.payload_field)
            session.scroll_id = page.scroll_id
            if page.shards_failed:
                raise ShardFailureError(page.shards_failed, page.shard_failures)

            session.total = page.total
            logger.debug(
                f"第 {session.pages} 页: {len(page)} 条文档, "
                f"{len(buffer)} 字节, 已分发 {session.emitted}/{session.total}"
            )
            if not len(page):
                return PageOutcome.EXHAUSTED

            for payload in page.payloads():
                if cancel_event is not None and cancel_event.is_set():
                    return PageOutcome.CANCELLED
                action = self.handler(payload, session.emitted, session.total)
                if action is HandlerAction.CANCEL:
                    return PageOutcome.CANCELLED
                if action is not None and action is not HandlerAction.CONTINUE:
                    raise HandlerError(
                        f"处理函数返回了无法识别的值: {action!r}，"
                        "应返回 None、HandlerAction.CONTINUE 或 HandlerAction.CANCEL"
                    )
                session.emitted += 1

        return PageOutcome.CONTINUE

    def _release_scroll(self, session: ExportSession) -> None:
        """尽力释放服务端滚动上下文，失败只记录日志."""
        if not session.scroll_id:
            return
        try:
            with self.buffer_pool.borrow() as buffer:
                status = self.transport.perform_request(
                    "DELETE",
                    ScrollEndpoints.SCROLL_PATH,
                    body={"scroll_id": [session.scroll_id]},
                    sink=buffer,
                    timeout=self.config.release_timeout,
                )
                if not _is_success(status):
                    logger.warning(
                        f"释放滚动上下文失败: HTTP {status}: "
                        f"{bytes(buffer[:1000]).decode('utf-8', 'replace')}"
                    )
        except Exception as e:
            logger.warning(f"释放滚动上下文失败（已忽略）: {e}")

    def run(
        self,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExportResult:
        """执行导出直到结果耗尽、被取消或出错.

        Args:
            timeout: 整个会话的超时时间（秒），None 表示不限
            cancel_event: 协作式取消事件，被设置后在下一个请求或下一条文档前停止

        Returns:
            导出结果；正常耗尽和取消都不视为错误

        Raises:
            TransportFailureError: 传输失败
            ProtocolError: 非成功状态码
            ShardFailureError: 存在失败分片
            StructuralError: 响应结构不符
            EstimationError: 探测请求为空
            ExportTimeoutError: 超过截止时间
            HandlerError: 处理函数返回值无法识别
            Exception: 处理函数自身抛出的异常原样传播
        """
        start_time = time.time()
        deadline = time.monotonic() + timeout if timeout is not None else None
        session = ExportSession()

        logger.info(
            f"开始导出: index={self.config.index}, path={self.config.search_path}, "
            f"scroll={self.config.scroll}"
        )
        batch_size = self._resolve_batch_size(deadline)
        logger.info(f"每页文档数: {batch_size}")

        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    outcome = PageOutcome.CANCELLED
                else:
                    outcome = self._fetch_page(
                        session, batch_size, deadline, cancel_event
                    )

                if outcome is PageOutcome.CONTINUE:
                    continue
                if outcome is PageOutcome.CANCELLED:
                    logger.info(f"导出已取消: 已分发 {session.emitted} 条")
                else:
                    logger.info(
                        f"导出完成: 共 {session.emitted} 条, {session.pages} 页"
                    )
                break
        finally:
            self._release_scroll(session)

        return ExportResult(
            outcome=outcome,
            dispatched=session.emitted,
            total=session.total,
            pages=session.pages,
            bytes_received=session.bytes_received,
            batch_size=batch_size,
            took=time.time() - start_time,
        )
