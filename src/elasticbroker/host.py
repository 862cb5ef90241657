"""openbrokerapi 宿主适配模块.

将 BrokerService 接入 openbrokerapi 框架：框架负责 OSBAPI 的 HTTP 端点、
请求校验与目录服务，这里只把 provision / deprovision / update / bind /
unbind 请求翻译为对应的生命周期调用。

openbrokerapi 在 deprovision、unbind 时只传实例 ID，因此适配器用一个
进程内注册表保存创建时确定的实例记录（包括写回的 indexName）。
"""

import logging
import threading

from openbrokerapi import api, errors
from openbrokerapi.service_broker import (
    BindDetails,
    Binding,
    DeprovisionDetails,
    DeprovisionServiceSpec,
    ProvisionDetails,
    ProvisionedServiceSpec,
    Service,
    ServiceBroker,
    ServicePlan,
    UnbindDetails,
    UnbindSpec,
    UpdateDetails,
    UpdateServiceSpec,
)

from .config import BrokerConfig
from .models import ServiceBinding, ServiceInstance
from .service import BrokerService

logger = logging.getLogger(__name__)

SERVICE_ID = "3c1a4a8e-5f2b-4c3d-9d53-6e0a1f7b2c91"
PLAN_ID = "b6f0a7d2-1e4c-4a9b-8f3e-2d5c7a9e1b04"


def build_catalog() -> Service:
    """构建 Broker 目录：一个可绑定的服务与一个 standard 计划."""
    return Service(
        id=SERVICE_ID,
        name="elasticsearch-index",
        description="Provisions an Elasticsearch index per service instance.",
        bindable=True,
        plan_updateable=False,
        tags=["elasticsearch", "search"],
        plans=[
            ServicePlan(
                id=PLAN_ID,
                name="standard",
                description="A single index on the shared Elasticsearch cluster.",
            ),
        ],
    )


class BrokerHost(ServiceBroker):
    """BrokerService 的 openbrokerapi 适配器.

    所有操作都同步完成，BrokerService 抛出的 ElasticSearchBrokerError
    不做处理，直接交由框架渲染为通用错误响应。

    Args:
        service: 生命周期处理器
    """

    def __init__(self, service: BrokerService):
        self.service = service
        self._instances: dict[str, ServiceInstance] = {}
        self._bindings: dict[str, ServiceBinding] = {}
        self._provisioning: set[str] = set()
        self._lock = threading.Lock()

    def catalog(self) -> Service:
        return build_catalog()

    def _get_instance(self, instance_id: str) -> ServiceInstance:
        with self._lock:
            instance = self._instances.get(instance_id)
        if instance is None:
            raise errors.ErrInstanceDoesNotExist()
        return instance

    def provision(
        self,
        instance_id: str,
        details: ProvisionDetails,
        async_allowed: bool,
        **kwargs,
    ) -> ProvisionedServiceSpec:
        instance = ServiceInstance(
            id=instance_id,
            parameters=dict(details.parameters or {}),
            service_id=details.service_id,
            plan_id=details.plan_id,
            organization_guid=details.organization_guid,
            space_guid=details.space_guid,
        )

        # 在锁内预留实例 ID，创建期间同 ID 的请求直接拒绝
        with self._lock:
            if instance_id in self._instances or instance_id in self._provisioning:
                raise errors.ErrInstanceAlreadyExists()
            self._provisioning.add(instance_id)

        try:
            self.service.create_instance(instance)
            with self._lock:
                self._instances[instance_id] = instance
        finally:
            with self._lock:
                self._provisioning.discard(instance_id)
        logger.info(f"实例 '{instance_id}' 创建完成")
        return ProvisionedServiceSpec()

    def deprovision(
        self,
        instance_id: str,
        details: DeprovisionDetails,
        async_allowed: bool,
        **kwargs,
    ) -> DeprovisionServiceSpec:
        instance = self._get_instance(instance_id)
        self.service.delete_instance(instance)

        with self._lock:
            self._instances.pop(instance_id, None)
            stale = [
                key
                for key, binding in self._bindings.items()
                if binding.instance_id == instance_id
            ]
            for binding_id in stale:
                del self._bindings[binding_id]
        logger.info(f"实例 '{instance_id}' 删除完成")
        return DeprovisionServiceSpec(is_async=self.service.is_async())

    def update(
        self,
        instance_id: str,
        details: UpdateDetails,
        async_allowed: bool,
        **kwargs,
    ) -> UpdateServiceSpec:
        instance = self._get_instance(instance_id)
        self.service.update_instance(instance)
        return UpdateServiceSpec(is_async=self.service.is_async())

    def bind(
        self,
        instance_id: str,
        binding_id: str,
        details: BindDetails,
        async_allowed: bool,
        **kwargs,
    ) -> Binding:
        instance = self._get_instance(instance_id)
        with self._lock:
            if binding_id in self._bindings:
                raise errors.ErrBindingAlreadyExists()

        binding = ServiceBinding(
            id=binding_id,
            app_guid=details.app_guid,
            parameters=dict(details.parameters or {}),
            instance_id=instance_id,
        )
        self.service.create_binding(instance, binding)
        credentials = self.service.get_credentials(instance, binding)

        with self._lock:
            self._bindings[binding_id] = binding
        return Binding(credentials=credentials)

    def unbind(
        self,
        instance_id: str,
        binding_id: str,
        details: UnbindDetails,
        async_allowed: bool,
        **kwargs,
    ) -> UnbindSpec:
        instance = self._get_instance(instance_id)
        with self._lock:
            binding = self._bindings.get(binding_id)
        if binding is None:
            raise errors.ErrBindingDoesNotExist()

        self.service.delete_binding(instance, binding)
        with self._lock:
            self._bindings.pop(binding_id, None)
        return UnbindSpec(is_async=self.service.is_async())


def serve(host: BrokerHost, config: BrokerConfig) -> None:
    """使用 openbrokerapi 内置服务器启动 Broker.

    Args:
        host: Broker 适配器
        config: Broker 配置，提供监听地址与 Basic Auth 凭据
    """
    credentials = api.BrokerCredentials(config.broker_username, config.broker_password)
    logger.info(f"Broker 监听于 {config.listen_host}:{config.listen_port}")
    api.serve(
        host,
        credentials,
        logger=logger,
        host=config.listen_host,
        port=int(config.listen_port),
    )
