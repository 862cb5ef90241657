"""Elasticsearch Service Broker - 按服务实例创建与删除 Elasticsearch 索引的 Broker.

主要功能:
    - ElasticSearchBroker: 生命周期处理器，创建/删除索引并返回绑定凭据
    - ElasticSearchBrokerError: 统一的 broker 操作失败异常
    - BrokerHost: 接入 openbrokerapi 框架的宿主适配器

使用示例:
    from elasticbroker import BrokerConfig, ElasticSearchBroker, ServiceInstance
    from elasticbroker.connection import ElasticsearchIndexClient, create_es_client

    config = BrokerConfig.from_env()
    broker = ElasticSearchBroker(config, ElasticsearchIndexClient(create_es_client(config)))
    broker.create_instance(ServiceInstance(id="abc-123"))
"""

__version__ = "0.1.0"

# 导出配置
from elasticbroker.config import BrokerConfig

# 导出异常
from elasticbroker.exceptions import (
    ConfigError,
    ElasticBrokerError,
    ElasticSearchBrokerError,
)

# 导出数据模型
from elasticbroker.models import INDEX_NAME_KEY, ServiceBinding, ServiceInstance

# 导出生命周期处理器
from elasticbroker.service import BrokerService, DefaultService, ElasticSearchBroker

__all__ = [
    # 版本
    "__version__",
    # 配置
    "BrokerConfig",
    # 数据模型
    "INDEX_NAME_KEY",
    "ServiceInstance",
    "ServiceBinding",
    # 生命周期处理器
    "BrokerService",
    "DefaultService",
    "ElasticSearchBroker",
    # 异常
    "ElasticBrokerError",
    "ConfigError",
    "ElasticSearchBrokerError",
]
