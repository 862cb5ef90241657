"""Service Broker 数据模型定义模块.

提供宿主框架传入生命周期回调的记录模型，包括：
- ServiceInstance: 服务实例记录
- ServiceBinding: 服务绑定记录
"""

from dataclasses import dataclass, field
from typing import Any

# 实例参数中保存索引名称的键
INDEX_NAME_KEY = "indexName"


@dataclass
class ServiceInstance:
    """服务实例记录.

    由宿主框架在每次调用前创建或加载，create_instance 会就地修改 parameters。

    Attributes:
        id: 平台分配的实例 ID
        parameters: 客户端传入的自由参数，创建完成后必定包含 indexName
        service_id: 目录中的服务 ID
        plan_id: 目录中的计划 ID
        organization_guid: 所属组织 GUID
        space_guid: 所属空间 GUID

    Examples:
        >>> instance = ServiceInstance(id="abc-123", parameters={"indexName": "logs"})
        >>> instance.index_name
        'logs'
    """

    id: str
    parameters: dict[str, Any] = field(default_factory=dict)
    service_id: str | None = None
    plan_id: str | None = None
    organization_guid: str | None = None
    space_guid: str | None = None

    @property
    def index_name(self) -> Any:
        """实例对应的索引名称."""
        return self.parameters.get(INDEX_NAME_KEY)


@dataclass
class ServiceBinding:
    """服务绑定记录.

    表示消费应用与服务实例之间的关联，对生命周期处理器只读。

    Attributes:
        id: 平台分配的绑定 ID
        app_guid: 消费应用的 GUID
        parameters: 绑定时传入的自由参数
        instance_id: 所属实例 ID
    """

    id: str
    app_guid: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)
    instance_id: str | None = None
