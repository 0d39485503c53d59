"""测试公共 fixtures.

提供内存中的假传输和 ES 响应构造函数，用于在没有真实集群的情况下
驱动分页引擎和估算器。
"""

from __future__ import annotations

import json
from typing import Any

import pytest


class FakeTransport:
    """按顺序返回预置响应的假传输.

    responses 中每一项是 (status, body) 元组或要抛出的异常。
    DELETE 请求（释放滚动上下文）不消耗预置响应，返回 release_response。
    """

    def __init__(
        self,
        responses: list[Any],
        release_response: Any = (200, b'{"succeeded":true,"num_freed":1}'),
    ) -> None:
        self.responses = list(responses)
        self.release_response = release_response
        self.requests: list[dict[str, Any]] = []

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
        self.requests.append(
            {
                "method": method,
                "path": path,
                "params": params,
                "body": body,
                "timeout": timeout,
            }
        )
        item = self.release_response if method == "DELETE" else self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status, data = item
        sink += data
        return status

    @property
    def page_requests(self) -> list[dict[str, Any]]:
        return [r for r in self.requests if r["method"] == "POST"]

    @property
    def release_requests(self) -> list[dict[str, Any]]:
        return [r for r in self.requests if r["method"] == "DELETE"]


def build_response(
    sources: list[bytes],
    scroll_id: str | None = "scroll-1",
    total: int | None = None,
    failed: int = 0,
    total_as_object: bool = True,
) -> bytes:
    """构造 ES 搜索/滚动响应的原始字节.

    sources 为每条命中 _source 的原始字节，原样嵌入响应。
    """
    total = len(sources) if total is None else total
    total_raw = (
        f'{{"value":{total},"relation":"eq"}}' if total_as_object else str(total)
    )
    hits = b",".join(
        b'{"_index":"logs","_id":"%d","_score":null,"_source":%s,"sort":[%d]}'
        % (i, source, i)
        for i, source in enumerate(sources)
    )
    head = ""
    if scroll_id is not None:
        head = f'"_scroll_id":{json.dumps(scroll_id)},'
    return (
        b"{"
        + head.encode()
        + b'"took":3,"timed_out":false,'
        + f'"_shards":{{"total":5,"successful":{5 - failed},"skipped":0,"failed":{failed}}},'.encode()
        + f'"hits":{{"total":{total_raw},"max_score":null,"hits":['.encode()
        + hits
        + b"]}}"
    )


@pytest.fixture
def make_response():
    """返回响应构造函数."""
    return build_response


@pytest.fixture
def fake_transport():
    """返回假传输工厂."""
    return FakeTransport
