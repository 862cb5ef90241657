"""索引客户端模块 - 生命周期处理器所依赖的窄接口与 Elasticsearch 适配实现.

主要组件:
    - IndexClient: 索引客户端协议（create_index / delete_index）
    - ElasticsearchIndexClient: 基于 elasticsearch.Elasticsearch 的实现
    - ConnectionConfig: 连接池与重试配置模型
    - create_es_client: 根据 BrokerConfig 构建 Elasticsearch 客户端

使用示例:
    from elasticbroker.connection import ElasticsearchIndexClient, create_es_client

    client = ElasticsearchIndexClient(create_es_client(broker_config))
    client.create_index("logs")
"""

from .models import ConnectionConfig
from .tool import ElasticsearchIndexClient, IndexClient, create_es_client

__all__ = [
    # 协议与实现
    "IndexClient",
    "ElasticsearchIndexClient",
    # 模型
    "ConnectionConfig",
    # 工厂
    "create_es_client",
]
