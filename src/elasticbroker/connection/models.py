"""索引客户端连接配置模型定义模块."""

from dataclasses import dataclass

from ..exceptions import ConfigError


@dataclass
class ConnectionConfig:
    """连接池配置模型.

    定义 ES 客户端的重试策略与超时参数。Broker 自身不做重试，
    重试与超时行为完全继承自底层客户端。

    Attributes:
        max_retries: 最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        http_compress: 是否启用 HTTP 压缩，默认 True

    Raises:
        ConfigError: 当参数不合法时抛出

    Examples:
        >>> config = ConnectionConfig(request_timeout=60)
    """

    max_retries: int = 3
    retry_on_timeout: bool = True
    request_timeout: int = 30
    http_compress: bool = True

    def __post_init__(self) -> None:
        """校验连接配置参数合法性."""
        if self.max_retries < 0:
            raise ConfigError(f"max_retries 必须 >= 0，当前值: {self.max_retries}")
        if self.request_timeout < 0:
            raise ConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
