"""BrokerHost openbrokerapi 适配器单元测试."""

from unittest.mock import MagicMock, patch

import pytest
from openbrokerapi import errors
from openbrokerapi.service_broker import (
    BindDetails,
    BindState,
    DeprovisionDetails,
    ProvisionDetails,
    ProvisionState,
    UnbindDetails,
    UpdateDetails,
)

from elasticbroker.config import BrokerConfig
from elasticbroker.exceptions import ElasticSearchBrokerError
from elasticbroker.host import PLAN_ID, SERVICE_ID, BrokerHost, serve
from elasticbroker.service import ElasticSearchBroker


# ============================================================
# 辅助 fixtures
# ============================================================


@pytest.fixture
def client() -> MagicMock:
    """创建模拟索引客户端."""
    return MagicMock()


@pytest.fixture
def host(client) -> BrokerHost:
    """创建接入真实生命周期处理器的适配器."""
    config = BrokerConfig(elastic_host="es.local", elastic_port="9200")
    return BrokerHost(ElasticSearchBroker(config, client))


def provision_details(parameters=None) -> ProvisionDetails:
    return ProvisionDetails(
        service_id=SERVICE_ID,
        plan_id=PLAN_ID,
        organization_guid="org-1",
        space_guid="space-1",
        parameters=parameters,
    )


def bind_details(app_guid="app-guid-1") -> BindDetails:
    return BindDetails(service_id=SERVICE_ID, plan_id=PLAN_ID, app_guid=app_guid)


class TestCatalog:
    """catalog 测试."""

    def test_single_bindable_service(self, host) -> None:
        """测试目录包含一个可绑定服务与 standard 计划."""
        service = host.catalog()

        assert service.id == SERVICE_ID
        assert service.bindable is True
        assert [plan.id for plan in service.plans] == [PLAN_ID]
        assert service.plans[0].name == "standard"


class TestProvision:
    """provision / deprovision 测试."""

    def test_provision_with_default_index_name(self, host, client) -> None:
        """测试未传参数时以实例 ID 创建索引."""
        spec = host.provision("abc-123", provision_details(), False)

        assert spec.state == ProvisionState.SUCCESSFUL_CREATED
        client.create_index.assert_called_once_with("abc-123")

    def test_provision_with_index_name(self, host, client) -> None:
        """测试使用传入的 indexName 创建索引."""
        host.provision("abc-123", provision_details({"indexName": "logs"}), False)

        client.create_index.assert_called_once_with("logs")

    def test_provision_twice_raises(self, host, client) -> None:
        """测试重复创建同一实例时抛出 ErrInstanceAlreadyExists."""
        host.provision("abc-123", provision_details(), False)

        with pytest.raises(errors.ErrInstanceAlreadyExists):
            host.provision("abc-123", provision_details(), False)
        assert client.create_index.call_count == 1

    def test_failed_provision_is_not_registered(self, host, client) -> None:
        """测试创建失败时异常透传且实例不被记录."""
        client.create_index.side_effect = RuntimeError("connection refused")

        with pytest.raises(ElasticSearchBrokerError):
            host.provision("abc-123", provision_details(), False)

        with pytest.raises(errors.ErrInstanceDoesNotExist):
            host.deprovision(
                "abc-123", DeprovisionDetails(SERVICE_ID, PLAN_ID), False
            )

    def test_retry_after_failed_provision(self, host, client) -> None:
        """测试创建失败后释放实例 ID，可再次创建."""
        client.create_index.side_effect = [RuntimeError("connection refused"), None]

        with pytest.raises(ElasticSearchBrokerError):
            host.provision("abc-123", provision_details(), False)
        spec = host.provision("abc-123", provision_details(), False)

        assert spec.state == ProvisionState.SUCCESSFUL_CREATED
        assert client.create_index.call_count == 2

    def test_provision_in_flight_rejects_same_id(self, host, client) -> None:
        """测试创建进行中时同 ID 的请求被拒绝，不创建第二个索引."""
        rejected = []

        def create_during_provision(name):
            with pytest.raises(errors.ErrInstanceAlreadyExists):
                host.provision("abc-123", provision_details({"indexName": "other"}), False)
            rejected.append(name)

        client.create_index.side_effect = create_during_provision

        host.provision("abc-123", provision_details({"indexName": "logs"}), False)
        host.deprovision("abc-123", DeprovisionDetails(SERVICE_ID, PLAN_ID), False)

        assert rejected == ["logs"]
        client.create_index.assert_called_once_with("logs")
        client.delete_index.assert_called_once_with("logs")

    def test_deprovision_uses_stored_index_name(self, host, client) -> None:
        """测试删除时使用创建时确定的索引名."""
        host.provision("abc-123", provision_details({"indexName": "logs"}), False)

        spec = host.deprovision(
            "abc-123", DeprovisionDetails(SERVICE_ID, PLAN_ID), False
        )

        assert spec.is_async is False
        client.delete_index.assert_called_once_with("logs")

    def test_deprovision_unknown_instance(self, host, client) -> None:
        """测试删除不存在的实例."""
        with pytest.raises(errors.ErrInstanceDoesNotExist):
            host.deprovision("missing", DeprovisionDetails(SERVICE_ID, PLAN_ID), False)
        client.delete_index.assert_not_called()

    def test_update(self, host, client) -> None:
        """测试更新实例不访问索引客户端."""
        host.provision("abc-123", provision_details(), False)

        spec = host.update("abc-123", UpdateDetails(SERVICE_ID, PLAN_ID), False)

        assert spec.is_async is False
        client.delete_index.assert_not_called()
        assert client.create_index.call_count == 1


class TestBind:
    """bind / unbind 测试."""

    def test_bind_returns_credentials(self, host) -> None:
        """测试绑定返回凭据."""
        host.provision("abc-123", provision_details({"indexName": "logs"}), False)

        binding = host.bind("abc-123", "binding-1", bind_details(), False)

        assert binding.state == BindState.SUCCESSFUL_BOUND
        assert binding.credentials == {
            "indexName": "logs",
            "host": "es.local",
            "port": "9200",
            "uri": "http://es.local:9200/logs",
        }

    def test_bind_unknown_instance(self, host) -> None:
        """测试绑定不存在的实例."""
        with pytest.raises(errors.ErrInstanceDoesNotExist):
            host.bind("missing", "binding-1", bind_details(), False)

    def test_bind_twice_raises(self, host) -> None:
        """测试重复绑定时抛出 ErrBindingAlreadyExists."""
        host.provision("abc-123", provision_details(), False)
        host.bind("abc-123", "binding-1", bind_details(), False)

        with pytest.raises(errors.ErrBindingAlreadyExists):
            host.bind("abc-123", "binding-1", bind_details(), False)

    def test_unbind(self, host) -> None:
        """测试解绑后绑定被移除."""
        host.provision("abc-123", provision_details(), False)
        host.bind("abc-123", "binding-1", bind_details(), False)

        spec = host.unbind("abc-123", "binding-1", UnbindDetails(SERVICE_ID, PLAN_ID), False)

        assert spec.is_async is False
        with pytest.raises(errors.ErrBindingDoesNotExist):
            host.unbind("abc-123", "binding-1", UnbindDetails(SERVICE_ID, PLAN_ID), False)

    def test_deprovision_drops_bindings(self, host) -> None:
        """测试删除实例时清理其绑定记录."""
        host.provision("abc-123", provision_details(), False)
        host.bind("abc-123", "binding-1", bind_details(), False)
        host.deprovision("abc-123", DeprovisionDetails(SERVICE_ID, PLAN_ID), False)
        host.provision("abc-123", provision_details(), False)

        binding = host.bind("abc-123", "binding-1", bind_details(), False)

        assert binding.credentials["indexName"] == "abc-123"


class TestServe:
    """serve 测试."""

    @patch("elasticbroker.host.api.serve")
    def test_serve_uses_config(self, mock_serve, host) -> None:
        """测试使用配置中的监听地址与凭据启动."""
        config = BrokerConfig(
            broker_username="broker",
            broker_password="secret",
            listen_host="127.0.0.1",
            listen_port="9000",
        )

        serve(host, config)

        args, kwargs = mock_serve.call_args
        assert args[0] is host
        assert args[1].username == "broker"
        assert args[1].password == "secret"
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000
