"""流式字段提取工具模块.

用 msgspec 按预先声明的响应结构解码原始响应字节：只物化游标令牌、分片失败数、
命中总数等头部字段，命中文档负载（默认 _source）保留为原始字节引用，不做解码。
"""

from __future__ import annotations

import functools
import logging
import re

import msgspec

from .exceptions import FieldTypeError, MalformedJsonError, MissingFieldError
from .models import DEFAULT_PAYLOAD_FIELD, Page, Shards, Total

logger = logging.getLogger(__name__)

_AT_PATH = re.compile(r" - at `\$(?P<path>[^`]*)`$")
_MISSING_FIELD = re.compile(r"^Object missing required field `(?P<field>[^`]+)`")
_EXPECTED_TYPE = re.compile(
    r"^Expected `(?P<expected>[^`]+)`, got `(?P<actual>[^`]+)`"
)
_BYTE_OFFSET = re.compile(r"\(byte (?P<offset>\d+)\)")

# msgspec 类型名 -> JSON 类型名
_TYPE_NAMES = {
    "str": "string",
    "int": "integer",
    "float": "number",
    "bool": "boolean",
}
_FIRST_BYTE_TYPES = {
    b"[": "array",
    b'"': "string",
    b"t": "boolean",
    b"f": "boolean",
    b"n": "null",
}


@functools.lru_cache(maxsize=16)
def _decoder_for(payload_field: str) -> msgspec.json.Decoder:
    """按负载字段名构建响应解码器."""
    hit = msgspec.defstruct(
        "Hit", [("payload", msgspec.Raw)], rename={"payload": payload_field}
    )
    hits = msgspec.defstruct("Hits", [("total", int | Total), ("hits", list[hit])])
    response = msgspec.defstruct(
        "Response",
        [("shards", Shards), ("hits", hits), ("scroll_id", str, "")],
        rename={"shards": "_shards", "scroll_id": "_scroll_id"},
    )
    return msgspec.json.Decoder(response)


def _type_name(name: str) -> str:
    return " | ".join(_TYPE_NAMES.get(part, part) for part in name.split(" | "))


def _structural_error(
    e: msgspec.ValidationError,
) -> MissingFieldError | FieldTypeError | MalformedJsonError:
    """把 msgspec 校验错误转换为带字段路径的结构异常."""
    message = str(e)
    path = ""
    match = _AT_PATH.search(message)
    if match:
        path = match.group("path").lstrip(".")
        message = message[: match.start()]

    missing = _MISSING_FIELD.match(message)
    if missing:
        field = missing.group("field")
        return MissingFieldError(f"{path}.{field}" if path else field)

    expected = _EXPECTED_TYPE.match(message)
    if expected:
        return FieldTypeError(
            path or "<root>",
            _type_name(expected.group("expected")),
            _type_name(expected.group("actual")),
        )
    return MalformedJsonError(message, -1, path)


def extract_page(
    buf: bytes | bytearray,
    payload_field: str = DEFAULT_PAYLOAD_FIELD,
    require_scroll_id: bool = True,
) -> Page:
    """从原始响应字节中提取一页.

    整个响应一次解码并校验完毕后才返回，任一命中结构不符都会使整页失败，
    此时不会有任何文档被分发。

    Args:
        buf: 原始响应体
        payload_field: 每条命中中要提取的子字段名，默认 "_source"
        require_scroll_id: 是否要求存在非空 _scroll_id（探测请求不带游标）

    Returns:
        页面视图

    Raises:
        MissingFieldError: 必需字段缺失
        FieldTypeError: 字段类型不符
        MalformedJsonError: JSON 语法错误

    示例:
        >>> page = extract_page(raw_bytes)
        >>> for doc in page.payloads():
        ...     sink.write(doc)
    """
    try:
        response = _decoder_for(payload_field).decode(buf)
    except msgspec.ValidationError as e:
        raise _structural_error(e) from e
    except msgspec.DecodeError as e:
        match = _BYTE_OFFSET.search(str(e))
        offset = int(match.group("offset")) if match else len(buf)
        raise MalformedJsonError(str(e), offset) from e

    if require_scroll_id and not response.scroll_id:
        raise MissingFieldError("_scroll_id", "游标令牌为空")

    raws = []
    for position, hit in enumerate(response.hits.hits):
        first = bytes(memoryview(hit.payload)[:1])
        if first != b"{":
            raise FieldTypeError(
                f"hits.hits[{position}].{payload_field}",
                "object",
                _FIRST_BYTE_TYPES.get(first, "number"),
            )
        raws.append(hit.payload)

    total = response.hits.total
    shards = response.shards
    page = Page(
        scroll_id=response.scroll_id or None,
        shards_failed=shards.failed,
        total=total if isinstance(total, int) else total.value,
        shard_failures=(bytes(shards.failures) or None) if shards.failed else None,
        raws=raws,
    )
    logger.debug(
        f"提取页面: {len(page)} 条文档, total={page.total}, "
        f"shards_failed={page.shards_failed}"
    )
    return page
