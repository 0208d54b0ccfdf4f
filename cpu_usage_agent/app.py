"""
FastAPI 应用

提供 HTTP 接口供中心节点拉取最新的 CPU 使用率指标
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request

from cpu_usage_agent import __version__
from cpu_usage_agent.agent import PENDING, Agent
from cpu_usage_agent.config import AgentConfig
from cpu_usage_agent.models import HealthResponse, SamplesResponse

logger = logging.getLogger(__name__)


def verify_token(request: Request, authorization: Optional[str] = Header(None)) -> bool:
    """
    验证 Token

    Args:
        authorization: Authorization 头，格式为 "Bearer <token>"

    Raises:
        HTTPException: Token 无效时抛出 401 错误
    """
    config: AgentConfig = request.app.state.config

    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    if parts[1] != config.token:
        raise HTTPException(status_code=401, detail="Invalid token")

    return True


def create_app(config: AgentConfig, agent: Agent) -> FastAPI:
    """
    创建 FastAPI 应用实例

    应用启动时启动采集循环，关闭时停止
    """
    app = FastAPI(
        title="CPU Usage Agent",
        version=__version__,
        description="CPU 使用率采集代理"
    )
    app.state.config = config
    app.state.agent = agent

    @app.on_event("startup")
    async def _start_collectors():
        logger.info(f"CPU Usage Agent starting up (node_id={config.node_id})")
        agent.start()

    @app.on_event("shutdown")
    async def _stop_collectors():
        logger.info("CPU Usage Agent shutting down...")
        await agent.stop()

    @app.get("/v1/samples", response_model=SamplesResponse)
    async def get_samples(authorized: bool = Depends(verify_token)):
        """获取最近一轮采集的指标"""
        return SamplesResponse(
            node_id=config.node_id,
            ts=datetime.now(timezone.utc),
            samples=agent.latest_samples(),
        )

    @app.get("/v1/health", response_model=HealthResponse)
    async def get_health():
        """健康检查端点"""
        checks = {}
        details = {}
        overall_status = "ok"

        for name, error in agent.status().items():
            if error is None:
                checks[name] = "ok"
                details[name] = None
            elif error is PENDING:
                checks[name] = "pending"
                details[name] = "No collection finished yet"
            else:
                checks[name] = "error"
                details[name] = error
                overall_status = "degraded"

        return HealthResponse(
            status=overall_status,
            timestamp=datetime.now(timezone.utc),
            checks=checks,
            details=details
        )

    return app
