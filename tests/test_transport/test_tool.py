"""ElasticsearchTransport 单元测试."""

import json
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from elastic_transport import ConnectionError as ESConnectionError
from elasticsearch import Elasticsearch
from elasticsearch.dsl import Q

from elasticexport.transport import (
    ClusterConfig,
    ConnectionConfig,
    ElasticsearchTransport,
    TransportFailureError,
    encode_body,
)

ES_PATCH_PATH = "elasticexport.transport.tool.Elasticsearch"


def make_client(status=200, body=b'{"ok":true}'):
    """构造节点池返回假节点的客户端."""
    node = MagicMock()
    node.perform_request.return_value = MagicMock(
        meta=MagicMock(status=status), body=body
    )
    client = MagicMock()
    client.transport.node_pool.get.return_value = node
    return client, node


class TestPerformRequest:
    """perform_request 测试."""

    def test_raw_body_appended_to_sink(self):
        """测试原始响应体写入 sink，返回状态码."""
        client, node = make_client(body=b'{"hits":{}}')
        transport = ElasticsearchTransport(client, headers={})
        sink = bytearray(b"")

        status = transport.perform_request("POST", "/logs/_search", sink=sink)

        assert status == 200
        assert sink == b'{"hits":{}}'

    def test_non_success_status_returned(self):
        """测试非 2xx 状态码不抛异常."""
        client, _ = make_client(status=404, body=b'{"error":"x"}')
        sink = bytearray()

        status = ElasticsearchTransport(client, headers={}).perform_request(
            "POST", "/missing/_search", sink=sink
        )

        assert status == 404
        assert sink == b'{"error":"x"}'

    def test_target_body_and_headers(self):
        """测试请求目标、请求体编码和请求头."""
        client, node = make_client()
        transport = ElasticsearchTransport(
            client, headers={"authorization": "Bearer abc"}
        )

        transport.perform_request(
            "POST",
            "/logs/_search",
            params={"scroll": "1m"},
            body={"size": 2, "sort": ["_doc"]},
            sink=bytearray(),
            timeout=5,
        )

        args, kwargs = node.perform_request.call_args
        assert args == ("POST", "/logs/_search?scroll=1m")
        assert json.loads(kwargs["body"]) == {"size": 2, "sort": ["_doc"]}
        assert kwargs["headers"]["authorization"] == "Bearer abc"
        assert kwargs["headers"]["content-type"] == "application/json"
        assert kwargs["headers"]["accept"] == "application/json"
        assert kwargs["request_timeout"] == 5

    def test_no_body_no_timeout(self):
        """测试无请求体时不带 content-type，无超时时使用节点默认值."""
        client, node = make_client()
        ElasticsearchTransport(client, headers={}).perform_request(
            "GET", "/", sink=bytearray()
        )

        _, kwargs = node.perform_request.call_args
        assert kwargs["body"] is None
        assert "content-type" not in kwargs["headers"]
        assert "request_timeout" not in kwargs

    def test_transport_error_wrapped(self):
        """测试连接错误转换为 TransportFailureError."""
        client, node = make_client()
        node.perform_request.side_effect = ESConnectionError("connection refused")

        with pytest.raises(TransportFailureError, match="connection refused") as exc_info:
            ElasticsearchTransport(client, headers={}).perform_request(
                "POST", "/_search/scroll", sink=bytearray()
            )
        assert isinstance(exc_info.value.__cause__, ESConnectionError)

    def test_transport_error_keeps_underlying_cause(self):
        """测试包装后的消息保留底层异常信息."""
        client, node = make_client()
        node.perform_request.side_effect = ESConnectionError(
            "Connection error", errors=(OSError("[Errno 111] Connection refused"),)
        )

        with pytest.raises(TransportFailureError, match="Errno 111"):
            ElasticsearchTransport(client, headers={}).perform_request(
                "POST", "/_search/scroll", sink=bytearray()
            )

    def test_unserializable_body_wrapped(self):
        """测试请求体无法序列化时抛出 TransportFailureError 且不发送请求."""
        client, node = make_client()

        with pytest.raises(TransportFailureError, match="序列化"):
            ElasticsearchTransport(client, headers={}).perform_request(
                "POST", "/logs/_search", body={"query": object()}, sink=bytearray()
            )
        node.perform_request.assert_not_called()


class TestEncodeBody:
    """encode_body 测试."""

    def test_dsl_query(self):
        """测试 elasticsearch.dsl 查询对象被转换为 dict."""
        body = {"query": Q("term", level="error")}
        assert json.loads(encode_body(body)) == {
            "query": {"term": {"level": "error"}}
        }

    def test_datetime_range_query(self):
        """测试带 datetime 的范围查询."""
        body = {"query": Q("range", ts={"gte": datetime(2024, 1, 1)})}
        assert encode_body(body) == (
            b'{"query":{"range":{"ts":{"gte":"2024-01-01T00:00:00"}}}}'
        )

    def test_decimal_value(self):
        """测试 Decimal 值."""
        assert json.loads(encode_body({"size": 1, "x": Decimal("1.5")})) == {
            "size": 1,
            "x": 1.5,
        }

    def test_compact_output(self):
        """测试输出为紧凑 JSON."""
        assert encode_body({"size": 2, "sort": ["_doc"]}) == (
            b'{"size":2,"sort":["_doc"]}'
        )


class TestFromCluster:
    """from_cluster 测试."""

    @patch(ES_PATCH_PATH)
    def test_client_kwargs(self, mock_es):
        """测试客户端构造参数."""
        mock_es.return_value._headers = {"authorization": "Basic xyz"}
        transport = ElasticsearchTransport.from_cluster(
            ClusterConfig(
                hosts=["https://es:9200"],
                username="elastic",
                password="pw",
                ca_certs="/tmp/ca.pem",
                verify_certs=False,
            ),
            ConnectionConfig(request_timeout=60, http_compress=False),
        )

        kwargs = mock_es.call_args.kwargs
        assert kwargs["hosts"] == ["https://es:9200"]
        assert kwargs["request_timeout"] == 60
        assert kwargs["http_compress"] is False
        assert kwargs["verify_certs"] is False
        assert kwargs["ca_certs"] == "/tmp/ca.pem"
        assert kwargs["max_retries"] == 0
        assert kwargs["basic_auth"] == ("elastic", "pw")
        assert transport.client is mock_es.return_value
        assert transport._headers["authorization"] == "Basic xyz"

    @patch(ES_PATCH_PATH)
    def test_api_key(self, mock_es):
        """测试 API Key 认证."""
        mock_es.return_value._headers = {}
        ElasticsearchTransport.from_cluster(
            ClusterConfig(hosts=["http://es:9200"], api_key=("id", "key"))
        )

        kwargs = mock_es.call_args.kwargs
        assert kwargs["api_key"] == ("id", "key")
        assert "basic_auth" not in kwargs

    @patch(ES_PATCH_PATH)
    def test_bearer_token(self, mock_es):
        """测试 Bearer Token 认证."""
        mock_es.return_value._headers = {}
        ElasticsearchTransport.from_cluster(
            ClusterConfig(hosts=["http://es:9200"], bearer_token="tok")
        )

        assert mock_es.call_args.kwargs["bearer_auth"] == "tok"

    @patch(ES_PATCH_PATH)
    def test_without_auth(self, mock_es):
        """测试无认证时不传认证参数."""
        mock_es.return_value._headers = {}
        ElasticsearchTransport.from_cluster(ClusterConfig(hosts=["http://es:9200"]))

        kwargs = mock_es.call_args.kwargs
        for key in ("basic_auth", "api_key", "bearer_auth", "ca_certs"):
            assert key not in kwargs

    def test_client_generated_auth_header(self):
        """测试请求头沿用客户端生成的认证头."""
        transport = ElasticsearchTransport(
            Elasticsearch("http://es:9200", api_key=("id", "key"))
        )
        # base64("id:key")
        assert transport._headers["authorization"] == "ApiKey aWQ6a2V5"
        assert transport._headers["accept"] == "application/json"
