"""命令行入口: python -m elasticbroker."""

import argparse
import logging
import sys

from .config import BrokerConfig
from .connection import ElasticsearchIndexClient, create_es_client
from .exceptions import ConfigError
from .host import BrokerHost, serve
from .service import ElasticSearchBroker

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elastic-broker",
        description="按服务实例创建 Elasticsearch 索引的 Service Broker",
    )
    parser.add_argument("--host", help="监听地址，覆盖 BROKER_HOST")
    parser.add_argument("--port", type=int, help="监听端口，覆盖 BROKER_PORT")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别，默认 INFO",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = BrokerConfig.from_env()
    if args.host:
        config.listen_host = args.host
    if args.port is not None:
        config.listen_port = args.port

    try:
        config.validate()
    except ConfigError as e:
        logger.error(f"配置错误: {e}")
        return 2

    client = ElasticsearchIndexClient(create_es_client(config))
    try:
        serve(BrokerHost(ElasticSearchBroker(config, client)), config)
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
