"""统一结构化日志封装。

为什么：
- 各层（sim_env/core/agents）共用一套日志配置，避免到处 basicConfig
- 采用 logging + structlog，事件名使用点分风格（如 "dynamics.step"），上下文用关键字参数

如何使用：
- 在任何模块：from industrial_benchmark.utils.logger import get_logger; log = get_logger(__name__)
- 记录：log.info("message", key=value)
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog


_CONFIGURED = False


def _configure_once(level: int = logging.INFO) -> None:
    """全局一次性配置结构化日志。

    设计考量：
    - 延迟配置：避免模块导入时产生副作用
    - 幂等：重复调用不改变状态
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True


def configure_logging(level: str | int = "INFO") -> None:
    """显式设置日志级别（供 main.py 的 --log-level 使用）。

    已经输出过日志的 logger 会被 structlog 缓存，级别调整只对之后首次使用的 logger 生效。
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if not _CONFIGURED:
        _configure_once(level)
        return
    logging.getLogger().setLevel(level)
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


def get_logger(name: Optional[str] = None):
    """获取统一的结构化 Logger。"""
    _configure_once()
    return structlog.get_logger(name or "industrial_benchmark")
