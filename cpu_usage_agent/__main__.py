"""
CPU Usage Agent 主程序入口

使用方式:
    python -m cpu_usage_agent
    或
    cpu-usage-agent
"""

import logging
import sys
from pathlib import Path

import uvicorn

from cpu_usage_agent.agent import Agent
from cpu_usage_agent.app import create_app
from cpu_usage_agent.collectors import CollectorRegistry, register_builtin_collectors
from cpu_usage_agent.config import LoggingConfig, get_config


def setup_logging(config: LoggingConfig):
    """配置日志"""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    level = getattr(logging, config.level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(log_format))
        logging.getLogger().addHandler(file_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def main():
    """主程序入口"""
    try:
        config = get_config()
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Please create config file at /etc/cpu-usage-agent/config.yaml", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.logging)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting CPU Usage Agent, node_id={config.node_id}, listen={config.listen}")

    registry = register_builtin_collectors(CollectorRegistry())
    agent = Agent(config, registry)
    app = create_app(config, agent)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.logging.level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
