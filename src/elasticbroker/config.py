"""Broker 配置模型定义模块.

提供从环境变量显式加载的 Broker 配置，生命周期处理器、客户端工厂与
宿主适配器均通过构造参数接收该配置，不读取任何全局状态。

使用示例:
    from elasticbroker.config import BrokerConfig

    config = BrokerConfig.from_env({"ELASTIC_HOST": "es.local", "ELASTIC_PORT": "9200"})
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigError

ELASTIC_HOST_ENV = "ELASTIC_HOST"
ELASTIC_PORT_ENV = "ELASTIC_PORT"
ELASTIC_USERNAME_ENV = "ELASTIC_USERNAME"
ELASTIC_PASSWORD_ENV = "ELASTIC_PASSWORD"
BROKER_USERNAME_ENV = "BROKER_USERNAME"
BROKER_PASSWORD_ENV = "BROKER_PASSWORD"
BROKER_HOST_ENV = "BROKER_HOST"
BROKER_PORT_ENV = "BROKER_PORT"


@dataclass
class BrokerConfig:
    """Broker 配置模型.

    Attributes:
        elastic_host: ES 主机名或 IP（ELASTIC_HOST），缺失时为 None
        elastic_port: ES 端口（ELASTIC_PORT），按原样保存字符串
        elastic_username: ES Basic Auth 用户名
        elastic_password: ES Basic Auth 密码
        broker_username: Broker API 的 Basic Auth 用户名
        broker_password: Broker API 的 Basic Auth 密码
        listen_host: Broker 监听地址，默认 0.0.0.0
        listen_port: Broker 监听端口，默认 8080

    Examples:
        >>> config = BrokerConfig(elastic_host="es.local", elastic_port="9200")
        >>> config.elastic_url
        'http://es.local:9200'
    """

    elastic_host: str | None = None
    elastic_port: str | None = None
    elastic_username: str | None = None
    elastic_password: str | None = None
    broker_username: str | None = None
    broker_password: str | None = None
    listen_host: str = "0.0.0.0"
    listen_port: int | str = 8080

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BrokerConfig":
        """从环境变量加载配置.

        Args:
            environ: 环境变量映射，默认使用 os.environ

        Returns:
            BrokerConfig 实例
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            elastic_host=env.get(ELASTIC_HOST_ENV),
            elastic_port=env.get(ELASTIC_PORT_ENV),
            elastic_username=env.get(ELASTIC_USERNAME_ENV),
            elastic_password=env.get(ELASTIC_PASSWORD_ENV),
            broker_username=env.get(BROKER_USERNAME_ENV),
            broker_password=env.get(BROKER_PASSWORD_ENV),
            listen_host=env.get(BROKER_HOST_ENV, defaults.listen_host),
            listen_port=env.get(BROKER_PORT_ENV, defaults.listen_port),
        )

    @property
    def elastic_url(self) -> str:
        """ES 节点地址，用于构建客户端."""
        return f"http://{self.elastic_host}:{self.elastic_port}"

    def validate(self) -> None:
        """校验启动 Broker 所需的配置.

        Raises:
            ConfigError: ES 地址或 Broker 凭据缺失、监听端口不合法时抛出
        """
        if not self.elastic_host or not self.elastic_port:
            raise ConfigError(
                f"{ELASTIC_HOST_ENV} 和 {ELASTIC_PORT_ENV} 必须同时配置"
            )
        if not self.broker_username or not self.broker_password:
            raise ConfigError(
                f"{BROKER_USERNAME_ENV} 和 {BROKER_PASSWORD_ENV} 必须同时配置"
            )
        try:
            port = int(self.listen_port)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"监听端口必须是整数，当前值: {self.listen_port}") from e
        if not 1 <= port <= 65535:
            raise ConfigError(f"监听端口必须在 1-65535 之间，当前值: {port}")
        self.listen_port = port
