"""索引客户端工具模块.

提供生命周期处理器消费的 IndexClient 协议，以及基于官方 elasticsearch
客户端的 ElasticsearchIndexClient 实现与客户端工厂函数。
"""

from __future__ import annotations

import logging
from typing import Protocol

from elasticsearch import Elasticsearch

from ..config import BrokerConfig
from .models import ConnectionConfig

logger = logging.getLogger(__name__)


class IndexClient(Protocol):
    """索引客户端协议.

    每个操作都是阻塞调用，失败时直接抛出异常。
    """

    def create_index(self, name: str) -> None: ...

    def delete_index(self, name: str) -> None: ...


class ElasticsearchIndexClient:
    """基于 Elasticsearch 官方客户端的 IndexClient 实现.

    不做存在性检查，也不转换异常：索引已存在、索引不存在、连接失败等
    错误原样抛给调用方。

    Args:
        es_client: Elasticsearch 客户端实例
    """

    def __init__(self, es_client: Elasticsearch):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client

    def create_index(self, name: str) -> None:
        """创建索引.

        Args:
            name: 索引名称
        """
        response = self.es_client.indices.create(index=name)
        logger.debug(f"创建索引 '{name}' 响应: {response}")

    def delete_index(self, name: str) -> None:
        """删除索引.

        Args:
            name: 索引名称
        """
        response = self.es_client.indices.delete(index=name)
        logger.debug(f"删除索引 '{name}' 响应: {response}")

    def close(self) -> None:
        """关闭底层客户端连接."""
        self.es_client.close()


def create_es_client(
    broker_config: BrokerConfig,
    connection_config: ConnectionConfig | None = None,
) -> Elasticsearch:
    """根据 Broker 配置创建 Elasticsearch 客户端实例.

    Args:
        broker_config: Broker 配置，提供 ES 地址与可选的 Basic Auth
        connection_config: 连接配置，默认使用 ConnectionConfig 的默认值

    Returns:
        Elasticsearch 客户端实例
    """
    connection_config = connection_config or ConnectionConfig()
    kwargs: dict = {
        "hosts": [broker_config.elastic_url],
        "max_retries": connection_config.max_retries,
        "retry_on_timeout": connection_config.retry_on_timeout,
        "request_timeout": connection_config.request_timeout,
        "http_compress": connection_config.http_compress,
    }

    # Basic Auth 认证
    if broker_config.elastic_username and broker_config.elastic_password:
        kwargs["basic_auth"] = (
            broker_config.elastic_username,
            broker_config.elastic_password,
        )

    logger.info(f"创建 Elasticsearch 客户端: {broker_config.elastic_url}")
    return Elasticsearch(**kwargs)
