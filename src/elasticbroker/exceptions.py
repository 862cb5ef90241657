"""Elasticsearch Service Broker 异常定义模块."""

import logging

from openbrokerapi.errors import ServiceException

logger = logging.getLogger(__name__)


class ElasticBrokerError(Exception):
    """Elasticsearch Service Broker 基础异常类."""

    pass


class ConfigError(ElasticBrokerError):
    """配置校验异常.

    当环境变量或连接参数不合法时抛出，例如端口不是整数、超时时间为负数等。
    """

    pass


class ElasticSearchBrokerError(ElasticBrokerError, ServiceException):
    """Broker 操作失败异常.

    将访问索引客户端时出现的任意异常统一包装为一种异常，并在构造时
    记录错误日志（消息与原始异常堆栈）。同时继承 openbrokerapi 的
    ServiceException，由宿主框架渲染为通用的 broker 错误响应。

    Attributes:
        cause: 原始异常

    Examples:
        >>> try:
        ...     client.create_index("logs")
        ... except Exception as e:
        ...     raise ElasticSearchBrokerError.from_cause(e) from e
    """

    def __init__(self, message: str | None, cause: BaseException) -> None:
        super().__init__(message)
        self.cause = cause
        self.__cause__ = cause
        logger.error(message, exc_info=(type(cause), cause, cause.__traceback__))

    @classmethod
    def from_cause(cls, cause: BaseException) -> "ElasticSearchBrokerError":
        """使用原始异常的消息构造包装异常.

        Args:
            cause: 原始异常

        Returns:
            ElasticSearchBrokerError 实例
        """
        return cls(str(cause), cause)
