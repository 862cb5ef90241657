"""Service Broker 生命周期处理模块.

宿主 broker 框架在实例与绑定生命周期的特定时间点调用这里的方法：
- create_instance / delete_instance / update_instance: 服务实例的创建、删除、更新
- create_binding / delete_binding: 应用绑定与解绑
- get_credentials: 绑定时返回给应用的连接凭据
- is_async: 能力标记，所有操作均为同步

示例用法:
    >>> from elasticbroker import BrokerConfig, ElasticSearchBroker, ServiceInstance
    >>> broker = ElasticSearchBroker(BrokerConfig.from_env(), index_client)
    >>> instance = ServiceInstance(id="abc-123")
    >>> broker.create_instance(instance)
    >>> instance.parameters
    {'indexName': 'abc-123'}
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from .config import BrokerConfig
from .connection import IndexClient
from .exceptions import ElasticSearchBrokerError
from .models import INDEX_NAME_KEY, ServiceBinding, ServiceInstance

logger = logging.getLogger(__name__)


class BrokerService(ABC):
    """Broker 生命周期接口.

    五个生命周期方法、凭据获取方法与一个能力标记，全部由宿主框架同步调用。
    """

    @abstractmethod
    def create_instance(self, instance: ServiceInstance) -> None:
        """create-service 时调用，可就地修改 instance.parameters."""

    @abstractmethod
    def delete_instance(self, instance: ServiceInstance) -> None:
        """delete-service 时调用，释放底层资源."""

    @abstractmethod
    def update_instance(self, instance: ServiceInstance) -> None:
        """update-service 时调用."""

    @abstractmethod
    def create_binding(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> None:
        """bind-service 时调用，在 get_credentials 之前执行."""

    @abstractmethod
    def delete_binding(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> None:
        """unbind-service 时调用."""

    @abstractmethod
    def get_credentials(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> dict[str, Any]:
        """返回 create-binding 结果中的凭据键值对."""

    @abstractmethod
    def is_async(self) -> bool:
        """是否以异步（轮询）方式完成操作."""


class DefaultService(BrokerService):
    """BrokerService 的空实现.

    所有生命周期方法什么都不做，凭据为空字典，适合作为不支持某些操作的
    broker 的显式委托对象。
    """

    def create_instance(self, instance: ServiceInstance) -> None:
        pass

    def delete_instance(self, instance: ServiceInstance) -> None:
        pass

    def update_instance(self, instance: ServiceInstance) -> None:
        pass

    def create_binding(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> None:
        pass

    def delete_binding(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> None:
        pass

    def get_credentials(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> dict[str, Any]:
        return {}

    def is_async(self) -> bool:
        return False


class ElasticSearchBroker(BrokerService):
    """Elasticsearch 索引 Broker.

    每个服务实例对应一个 ES 索引：创建实例时创建索引，删除实例时删除索引，
    绑定时返回索引的访问地址。处理器本身无状态，每次调用只依赖入参。

    Args:
        config: Broker 配置，提供 ELASTIC_HOST / ELASTIC_PORT
        client: 索引客户端
    """

    def __init__(self, config: BrokerConfig, client: IndexClient):
        if client is None:
            raise ValueError("client 不能为 None")
        self.config = config
        self.client = client

    def create_instance(self, instance: ServiceInstance) -> None:
        """创建实例对应的索引.

        未提供 indexName 参数时使用实例 ID 作为索引名，并写回 instance.parameters。

        Raises:
            ElasticSearchBrokerError: 索引客户端抛出任意异常时抛出
        """
        try:
            index_name = instance.parameters.get(INDEX_NAME_KEY)
            if index_name is None:
                index_name = instance.id
                instance.parameters[INDEX_NAME_KEY] = index_name

            logger.info(f"创建索引: {index_name}")
            self.client.create_index(str(index_name))
        except Exception as e:
            raise ElasticSearchBrokerError.from_cause(e) from e

    def delete_instance(self, instance: ServiceInstance) -> None:
        """删除实例对应的索引.

        直接使用实例参数中的 indexName，不检查索引是否存在。

        Raises:
            ElasticSearchBrokerError: indexName 缺失或索引客户端抛出异常时抛出
        """
        try:
            index_name = instance.parameters[INDEX_NAME_KEY]
            if index_name is None:
                raise KeyError(INDEX_NAME_KEY)
            logger.info(f"删除索引: {index_name}")
            self.client.delete_index(str(index_name))
        except Exception as e:
            raise ElasticSearchBrokerError.from_cause(e) from e

    def update_instance(self, instance: ServiceInstance) -> None:
        # 无操作
        logger.info(f"更新实例: {instance.id}")

    def create_binding(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> None:
        logger.info(
            f"绑定应用: {binding.app_guid} 到索引: {instance.index_name}"
        )

    def delete_binding(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> None:
        logger.info(
            f"解绑应用: {binding.app_guid} 与索引: {instance.index_name}"
        )

    def get_credentials(
        self, instance: ServiceInstance, binding: ServiceBinding
    ) -> dict[str, Any]:
        """构建绑定凭据.

        Returns:
            包含 indexName、host、port、uri 四个键的字典，
            uri 形如 http://{host}:{port}/{indexName}，不做任何转义

        Raises:
            ElasticSearchBrokerError: 组装凭据时出现任意异常时抛出
        """
        logger.info("返回凭据")

        try:
            credentials: dict[str, Any] = {
                INDEX_NAME_KEY: instance.index_name,
                "host": self.config.elastic_host,
                "port": self.config.elastic_port,
            }
            credentials["uri"] = (
                f"http://{credentials['host']}:{credentials['port']}"
                f"/{credentials[INDEX_NAME_KEY]}"
            )
            return credentials
        except Exception as e:
            raise ElasticSearchBrokerError.from_cause(e) from e

    def is_async(self) -> bool:
        return False
